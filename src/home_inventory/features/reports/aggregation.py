"""
Summary statistics and category breakdown for a report's item list.

Money is summed as Decimal and rounded to cents only when the result is
built, so totals do not depend on float summation order.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from ..inventory.schemas import ItemResponse
from .schemas import CategoryBreakdown, InventoryStatistics

UNCATEGORIZED = "Uncategorized"
CENT = Decimal("0.01")
ZERO = Decimal("0")


def item_total_value(item: ItemResponse) -> Decimal:
    """price x quantity, or zero for an item without a price."""
    if item.purchase_price is None:
        return ZERO
    return Decimal(str(item.purchase_price)) * item.quantity


def _to_float(amount: Decimal) -> float:
    return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def _percentage(part: Decimal, whole: Decimal) -> float:
    if whole <= 0:
        return 0.0
    return _to_float(part / whole * 100)


def compute_statistics(items: Sequence[ItemResponse]) -> InventoryStatistics:
    total_value = sum((item_total_value(item) for item in items), ZERO)
    purchase_dates = [item.purchase_date for item in items if item.purchase_date is not None]
    count = len(items)

    return InventoryStatistics(
        total_items=count,
        total_value=_to_float(total_value),
        total_quantity=sum(item.quantity for item in items),
        category_count=len({item.category for item in items if item.category is not None}),
        inventories_count=len({item.inventory_id for item in items}),
        oldest_item_date=min(purchase_dates) if purchase_dates else None,
        newest_item_date=max(purchase_dates) if purchase_dates else None,
        average_item_value=_to_float(total_value / count) if count else 0.0,
    )


def compute_category_breakdown(items: Sequence[ItemResponse]) -> list[CategoryBreakdown]:
    groups: dict[str, dict] = {}
    for item in items:
        label = item.category if item.category is not None else UNCATEGORIZED
        group = groups.setdefault(label, {"count": 0, "quantity": 0, "value": ZERO})
        group["count"] += 1
        group["quantity"] += item.quantity
        group["value"] += item_total_value(item)

    grand_total = sum((group["value"] for group in groups.values()), ZERO)
    ordered = sorted(groups.items(), key=lambda entry: (-entry[1]["value"], entry[0]))

    return [
        CategoryBreakdown(
            category=label,
            item_count=group["count"],
            total_quantity=group["quantity"],
            total_value=_to_float(group["value"]),
            percentage_of_total=_percentage(group["value"], grand_total),
        )
        for label, group in ordered
    ]


def aggregate(items: Sequence[ItemResponse]) -> tuple[InventoryStatistics, list[CategoryBreakdown]]:
    """
    Computes the statistics block and the per-category breakdown over the
    same item list.

    Breakdown entries are ordered by total value, highest first, with ties
    broken by category label. Percentages are 0 when the grand total is 0.
    """
    return compute_statistics(items), compute_category_breakdown(items)
