"""Renders an inventory report as a JSON document or a CSV table."""

import csv
import io
from collections.abc import Mapping

from .aggregation import UNCATEGORIZED, item_total_value
from .exceptions import ReportSerializationError
from .schemas import ApiResponse, InventoryReportData, ReportFormat

ENCODING = "utf-8"
UNKNOWN_INVENTORY = "Unknown"

CSV_HEADERS = [
    "ID",
    "Inventory",
    "Name",
    "Description",
    "Category",
    "Location",
    "Quantity",
    "Purchase Price",
    "Total Value",
    "Purchase Date",
    "Warranty Expiry",
    "Created At",
]

MEDIA_TYPES = {
    ReportFormat.JSON: "application/json",
    ReportFormat.CSV: "text/csv; charset=utf-8",
}


def report_filename(report: InventoryReportData, fmt: ReportFormat) -> str:
    return f"inventory_report_{report.generated_at:%Y%m%d_%H%M%S}.{fmt.value}"


def _render_json(report: InventoryReportData, inventory_names: Mapping[int, str]) -> bytes:
    envelope = ApiResponse[InventoryReportData](
        success=True,
        data=report,
        message=f"Report generated with {report.statistics.total_items} items",
    )
    return envelope.model_dump_json().encode(ENCODING)


def _render_csv(report: InventoryReportData, inventory_names: Mapping[int, str]) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADERS)

    for item in report.items:
        writer.writerow([
            item.id,
            inventory_names.get(item.inventory_id, UNKNOWN_INVENTORY),
            item.name,
            item.description or "",
            item.category if item.category is not None else UNCATEGORIZED,
            item.location or "",
            item.quantity,
            f"{item.purchase_price:.2f}" if item.purchase_price is not None else "",
            f"{item_total_value(item):.2f}",
            item.purchase_date.isoformat() if item.purchase_date else "",
            item.warranty_expiry.isoformat() if item.warranty_expiry else "",
            item.created_at.isoformat() if item.created_at else "",
        ])

    return output.getvalue().encode(ENCODING)


_RENDERERS = {
    ReportFormat.JSON: _render_json,
    ReportFormat.CSV: _render_csv,
}


def render_report(
    report: InventoryReportData,
    fmt: ReportFormat,
    inventory_names: Mapping[int, str],
) -> bytes:
    """
    Renders the report in the requested format.

    The JSON form is the standard response envelope with the report as
    ``data``. The CSV form is one header row plus one row per item; fields are
    quoted by the csv module wherever a delimiter, quote or line break would
    otherwise break the row.

    Args:
        report: The generated report.
        fmt: Output format.
        inventory_names: Display name for each inventory id; ids missing from
            the mapping render as "Unknown".

    Raises:
        ReportSerializationError: A value could not be encoded.
    """
    try:
        return _RENDERERS[fmt](report, inventory_names)
    except (csv.Error, UnicodeError, ValueError, TypeError) as e:
        raise ReportSerializationError(str(e), stage="render") from e
