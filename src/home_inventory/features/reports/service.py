"""
Reports Service Module

Generates inventory reports for an authenticated account. A report covers
every item the account may read (owned inventories, inventories shared with
it, and inventories of accounts that granted it access), narrowed by the
optional filters on the request.

The steps run in a fixed order and stop at the first failure:
validate -> authorize -> resolve scope -> build predicates -> resolve sort
-> query -> aggregate -> render. Failures are raised as ``ReportError``
subclasses and logged here with the account id and the failing stage.
"""

import datetime
import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.models import User as AuthUser
from .aggregation import aggregate
from .exceptions import (
    ReportAuthorizationError,
    ReportError,
    ReportInfrastructureError,
    ReportSerializationError,
    ReportValidationError,
)
from .export import MEDIA_TYPES, render_report, report_filename
from .filters import build_predicates
from .repository import fetch_inventory_names, fetch_report_items
from .schemas import (
    CategoryBreakdown,
    InventoryReportData,
    InventoryStatistics,
    ReportFormat,
    ReportRequest,
)
from .scope import check_inventory_access, resolve_scope
from .sorting import resolve_sort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedReport:
    content: bytes
    media_type: str
    filename: Optional[str] = None


def _describe_validation_error(error: ValidationError) -> str:
    reasons = []
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"])
        message = err["msg"].removeprefix("Value error, ")
        reasons.append(f"{field}: {message}" if field else message)
    return "; ".join(reasons)


def parse_report_request(params: Mapping[str, Any]) -> ReportRequest:
    """
    Validates raw report parameters.

    Dates must be YYYY-MM-DD, numbers must parse, and neither range may be
    inverted. Runs before any database access.

    Raises:
        ReportValidationError: With a readable reason for each bad field.
    """
    try:
        return ReportRequest.model_validate(dict(params))
    except ValidationError as e:
        raise ReportValidationError(_describe_validation_error(e), stage="validate") from e


def _log_failure(account_id: uuid.UUID, error: ReportError) -> None:
    if isinstance(error, ReportAuthorizationError):
        logger.warning(f"Report access denied for user {account_id}: {error.detail}")
    elif isinstance(error, (ReportInfrastructureError, ReportSerializationError)):
        logger.error(
            f"Report failed for user {account_id} at stage '{error.stage}': {error.detail}",
            exc_info=error,
        )
    else:
        logger.error(
            f"Report failed for user {account_id} at stage '{error.stage}': {error}",
            exc_info=error,
        )


async def _build_report(
    db: AsyncSession, account_id: uuid.UUID, request: ReportRequest
) -> InventoryReportData:
    if request.inventory_id is not None:
        if not await check_inventory_access(db, account_id, request.inventory_id):
            raise ReportAuthorizationError(
                f"inventory {request.inventory_id} is outside the caller's scope",
                stage="authorize",
            )

    scope = await resolve_scope(db, account_id)
    plan = build_predicates(scope, request)
    order = resolve_sort(request.sort_by, request.sort_order)
    items = await fetch_report_items(db, plan, order)

    try:
        statistics, breakdown = aggregate(items)
    except (ArithmeticError, ValueError) as e:
        raise ReportError(str(e), stage="aggregate") from e

    logger.info(f"Generated report with {len(items)} items for user {account_id}")
    return InventoryReportData(
        statistics=statistics,
        category_breakdown=breakdown,
        items=items,
        generated_at=datetime.datetime.now(datetime.timezone.utc),
        filters_applied=request,
    )


async def generate_inventory_report(
    db: AsyncSession, current_user: AuthUser, request: ReportRequest
) -> InventoryReportData:
    """
    Generates the full inventory report for the given account.

    Args:
        db: The database session; one connection is used for the whole report.
        current_user: The authenticated account requesting the report.
        request: A validated report request (see ``parse_report_request``).

    Returns:
        InventoryReportData: Statistics, category breakdown, the ordered item
        list, the generation timestamp and the filters that were applied. An
        empty match is a valid report with zero counts.

    Raises:
        ReportAuthorizationError: ``inventory_id`` is not readable by the caller.
        ReportInfrastructureError: The database failed or timed out.
        ReportError: Aggregation hit an internal defect.
    """
    try:
        return await _build_report(db, current_user.id, request)
    except ReportError as e:
        _log_failure(current_user.id, e)
        raise


async def export_inventory_report(
    db: AsyncSession, current_user: AuthUser, request: ReportRequest
) -> RenderedReport:
    """
    Generates the report and renders it in ``request.format``.

    CSV output resolves inventory ids to their names and carries a
    download filename embedding the generation timestamp.

    Raises:
        ReportSerializationError: The report was built but could not be rendered.
        Any error raised by ``generate_inventory_report``.
    """
    report = await generate_inventory_report(db, current_user, request)

    try:
        inventory_names: dict[int, str] = {}
        filename = None
        if request.format is ReportFormat.CSV:
            inventory_names = await fetch_inventory_names(
                db, (item.inventory_id for item in report.items)
            )
            filename = report_filename(report, request.format)
        content = render_report(report, request.format, inventory_names)
    except ReportError as e:
        _log_failure(current_user.id, e)
        raise

    return RenderedReport(
        content=content,
        media_type=MEDIA_TYPES[request.format],
        filename=filename,
    )


async def generate_statistics_report(
    db: AsyncSession, current_user: AuthUser, inventory_id: Optional[str] = None
) -> InventoryStatistics:
    """Statistics block only, over one inventory or the caller's whole scope."""
    request = parse_report_request({"inventory_id": inventory_id})
    report = await generate_inventory_report(db, current_user, request)
    return report.statistics


async def generate_category_report(
    db: AsyncSession, current_user: AuthUser, inventory_id: Optional[str] = None
) -> list[CategoryBreakdown]:
    """Category breakdown only, over one inventory or the caller's whole scope."""
    request = parse_report_request({"inventory_id": inventory_id})
    report = await generate_inventory_report(db, current_user, request)
    return report.category_breakdown
