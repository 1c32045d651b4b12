"""Maps the report's sort parameters onto an ORDER BY instruction."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..inventory.models import Item

DEFAULT_SORT_KEY = "created"

SORT_COLUMNS = {
    "name": Item.name,
    "price": Item.purchase_price,
    "date": Item.purchase_date,
    "category": Item.category,
    DEFAULT_SORT_KEY: Item.created_at,
}


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class OrderInstruction:
    key: str
    direction: SortDirection

    def order_by(self) -> list:
        column = SORT_COLUMNS[self.key]
        # Item id breaks ties so equal sort values come back in a stable order
        if self.direction is SortDirection.ASC:
            return [column.asc(), Item.id.asc()]
        return [column.desc(), Item.id.desc()]


def resolve_sort(sort_by: Optional[str] = None, sort_order: Optional[str] = None) -> OrderInstruction:
    """
    Resolves the requested sort. Never fails: an absent or unknown key sorts
    by creation time, and anything other than "asc" sorts descending.
    """
    key = sort_by if sort_by in SORT_COLUMNS else DEFAULT_SORT_KEY
    if sort_order is not None and sort_order.strip().lower() == SortDirection.ASC.value:
        direction = SortDirection.ASC
    else:
        direction = SortDirection.DESC
    return OrderInstruction(key=key, direction=direction)
