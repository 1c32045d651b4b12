import csv
import datetime
import io
import json

import pytest

from home_inventory.features.inventory.schemas import ItemResponse
from home_inventory.features.reports.aggregation import aggregate
from home_inventory.features.reports.exceptions import ReportSerializationError
from home_inventory.features.reports.export import (
    CSV_HEADERS,
    UNKNOWN_INVENTORY,
    render_report,
    report_filename,
)
from home_inventory.features.reports.schemas import (
    InventoryReportData,
    ReportFormat,
    ReportRequest,
)

GENERATED_AT = datetime.datetime(2026, 3, 4, 5, 6, 7, tzinfo=datetime.timezone.utc)


def build_report(items):
    statistics, breakdown = aggregate(items)
    return InventoryReportData(
        statistics=statistics,
        category_breakdown=breakdown,
        items=items,
        generated_at=GENERATED_AT,
        filters_applied=ReportRequest(),
    )


def read_csv(content: bytes):
    return list(csv.reader(io.StringIO(content.decode("utf-8"))))


def test_csv_header_and_uncategorized_row():
    items = [
        ItemResponse(id=1, inventory_id=5, name="Laptop", category="Electronics", purchase_price=100.0, quantity=2),
        ItemResponse(id=2, inventory_id=5, name="Lamp", quantity=1),
    ]

    rows = read_csv(render_report(build_report(items), ReportFormat.CSV, {5: "Home"}))

    assert rows[0] == CSV_HEADERS
    assert rows[0] == [
        "ID", "Inventory", "Name", "Description", "Category", "Location", "Quantity",
        "Purchase Price", "Total Value", "Purchase Date", "Warranty Expiry", "Created At",
    ]
    assert rows[1][:9] == ["1", "Home", "Laptop", "", "Electronics", "", "2", "100.00", "200.00"]
    assert rows[2][4] == "Uncategorized"
    assert rows[2][7] == ""
    assert rows[2][8] == "0.00"


def test_csv_fields_with_delimiters_round_trip():
    tricky = 'Shelf, top "left"\nsecond line'
    items = [ItemResponse(id=7, inventory_id=1, name=tricky, description="a,b", location='say "hi"')]

    rows = read_csv(render_report(build_report(items), ReportFormat.CSV, {1: "Main"}))

    assert len(rows) == 2
    assert rows[1][2] == tricky
    assert rows[1][3] == "a,b"
    assert rows[1][5] == 'say "hi"'


def test_csv_unresolved_inventory_renders_unknown():
    items = [ItemResponse(id=1, inventory_id=99, name="Orphan")]

    rows = read_csv(render_report(build_report(items), ReportFormat.CSV, {}))

    assert rows[1][1] == UNKNOWN_INVENTORY


def test_csv_dates_are_iso():
    items = [
        ItemResponse(
            id=1,
            inventory_id=1,
            name="Drill",
            purchase_date=datetime.date(2024, 2, 29),
            warranty_expiry=datetime.date(2026, 2, 28),
        )
    ]

    rows = read_csv(render_report(build_report(items), ReportFormat.CSV, {1: "Garage"}))

    assert rows[1][9] == "2024-02-29"
    assert rows[1][10] == "2026-02-28"


def test_unencodable_value_is_a_serialization_error():
    item = ItemResponse.model_construct(id=1, inventory_id=1, name="bad \udcff name", quantity=1)
    report = build_report([item])

    with pytest.raises(ReportSerializationError) as exc_info:
        render_report(report, ReportFormat.CSV, {1: "Home"})

    assert exc_info.value.stage == "render"
    assert exc_info.value.error == "export_error"


def test_json_is_response_envelope():
    items = [ItemResponse(id=1, inventory_id=5, name="Laptop", category="Electronics", purchase_price=100.0, quantity=2)]

    document = json.loads(render_report(build_report(items), ReportFormat.JSON, {}))

    assert document["success"] is True
    assert document["error"] is None
    assert document["message"] == "Report generated with 1 items"
    data = document["data"]
    assert data["statistics"]["total_value"] == 200.0
    assert data["category_breakdown"][0]["category"] == "Electronics"
    assert data["items"][0]["name"] == "Laptop"
    assert data["filters_applied"]["format"] == "json"


def test_report_filename_embeds_timestamp():
    report = build_report([])

    assert report_filename(report, ReportFormat.CSV) == "inventory_report_20260304_050607.csv"
