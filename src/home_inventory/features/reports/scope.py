"""Access scope: which inventories an account may read.

An account can read an inventory when it owns it, when the inventory has been
shared with it, or when the inventory's owner has granted it access to all of
their inventories. Both helpers below answer that in a single statement.
"""

import logging
import uuid

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..inventory.models import Inventory, InventoryShare, UserAccessGrant
from .exceptions import DATABASE_ERRORS, ReportInfrastructureError

logger = logging.getLogger(__name__)


def readable_inventories_condition(account_id: uuid.UUID):
    """WHERE condition on ``inventories`` matching every readable row."""
    shared_with_account = select(InventoryShare.inventory_id).where(
        InventoryShare.shared_with_user_id == account_id
    )
    grantors = select(UserAccessGrant.grantor_user_id).where(
        UserAccessGrant.grantee_user_id == account_id
    )
    return or_(
        Inventory.user_id == account_id,
        Inventory.id.in_(shared_with_account),
        Inventory.user_id.in_(grantors),
    )


def scope_query(account_id: uuid.UUID) -> Select:
    return (
        select(Inventory.id)
        .where(readable_inventories_condition(account_id))
        .order_by(Inventory.id)
    )


async def resolve_scope(db: AsyncSession, account_id: uuid.UUID) -> frozenset[int]:
    """
    Returns the ids of every inventory the account may read.

    An empty result is a valid scope, not an error.

    Raises:
        ReportInfrastructureError: the lookup could not be executed.
    """
    try:
        result = await db.execute(scope_query(account_id))
    except DATABASE_ERRORS as e:
        raise ReportInfrastructureError(str(e), stage="scope") from e
    scope = frozenset(result.scalars().all())
    logger.debug(f"Account {account_id} can read {len(scope)} inventories")
    return scope


async def check_inventory_access(
    db: AsyncSession, account_id: uuid.UUID, inventory_id: int
) -> bool:
    """True when the account may read the given inventory."""
    query = select(func.count()).select_from(Inventory).where(
        Inventory.id == inventory_id,
        readable_inventories_condition(account_id),
    )
    try:
        count = await db.scalar(query)
    except DATABASE_ERRORS as e:
        raise ReportInfrastructureError(str(e), stage="access_check") from e
    return bool(count)
