"""Reads report rows from the database and maps them to ``ItemResponse``."""

import asyncio
import logging
from collections.abc import Iterable
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.config import REPORT_QUERY_TIMEOUT_SECONDS
from ..inventory.models import Inventory, Item
from ..inventory.schemas import ItemResponse
from .exceptions import DATABASE_ERRORS, ReportInfrastructureError
from .filters import FilterPlan
from .sorting import OrderInstruction

logger = logging.getLogger(__name__)


def to_item_response(item: Item) -> ItemResponse:
    """Converts an Item model instance to an ItemResponse schema."""
    return ItemResponse(
        id=item.id,
        inventory_id=item.inventory_id,
        name=item.name,
        description=item.description,
        category=item.category,
        location=item.location,
        purchase_date=item.purchase_date,
        purchase_price=item.purchase_price,
        warranty_expiry=item.warranty_expiry,
        notes=item.notes,
        quantity=item.quantity,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


async def fetch_report_items(
    db: AsyncSession,
    plan: FilterPlan,
    order: OrderInstruction,
    timeout: Optional[float] = None,
) -> list[ItemResponse]:
    """
    Runs the report query in a single read.

    Args:
        db: The database session.
        plan: Filter predicates, combined with AND.
        order: Final ordering of the rows.
        timeout: Seconds before the read is abandoned; defaults to
            REPORT_QUERY_TIMEOUT_SECONDS, and 0 disables the bound.

    Returns:
        list[ItemResponse]: Matching items in the requested order.

    Raises:
        ReportInfrastructureError: The query failed or timed out. It is not
            retried here.
    """
    timeout = REPORT_QUERY_TIMEOUT_SECONDS if timeout is None else timeout
    query = select(Item).where(*plan.clauses()).order_by(*order.order_by())

    try:
        if timeout > 0:
            result = await asyncio.wait_for(db.execute(query), timeout=timeout)
        else:
            result = await db.execute(query)
    except asyncio.TimeoutError as e:
        raise ReportInfrastructureError(
            f"report query timed out after {timeout}s", stage="query"
        ) from e
    except DATABASE_ERRORS as e:
        raise ReportInfrastructureError(str(e), stage="query") from e

    return [to_item_response(item) for item in result.scalars().all()]


async def fetch_inventory_names(db: AsyncSession, inventory_ids: Iterable[int]) -> dict[int, str]:
    """Display names for the given inventories, keyed by id."""
    ids = sorted(set(inventory_ids))
    if not ids:
        return {}
    try:
        result = await db.execute(
            select(Inventory.id, Inventory.name).where(Inventory.id.in_(ids))
        )
    except DATABASE_ERRORS as e:
        raise ReportInfrastructureError(str(e), stage="inventory_names") from e
    return {inventory_id: name for inventory_id, name in result.all()}
