"""Filter predicates for the inventory report query.

A report request is turned into an ordered list of ``Predicate`` entries,
each pairing the kind of condition with the value it compares against. The
values are handed to SQLAlchemy as bound parameters when the plan is turned
into WHERE clauses, so user input never becomes part of the SQL text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from sqlalchemy import ColumnElement

from ..inventory.models import Item
from .schemas import ReportRequest

LIKE_ESCAPE = "\\"


class ClauseKind(str, Enum):
    SCOPE = "scope"
    INVENTORY = "inventory"
    CATEGORY = "category"
    LOCATION = "location"
    PURCHASED_FROM = "purchased_from"
    PURCHASED_TO = "purchased_to"
    PRICE_MIN = "price_min"
    PRICE_MAX = "price_max"


def escape_like(value: str) -> str:
    """Escapes LIKE wildcards so the value matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


CLAUSE_BUILDERS: dict[ClauseKind, Callable[[Any], ColumnElement[bool]]] = {
    ClauseKind.SCOPE: lambda ids: Item.inventory_id.in_(ids),
    ClauseKind.INVENTORY: lambda inventory_id: Item.inventory_id == inventory_id,
    ClauseKind.CATEGORY: lambda category: Item.category == category,
    ClauseKind.LOCATION: lambda pattern: Item.location.ilike(pattern, escape=LIKE_ESCAPE),
    ClauseKind.PURCHASED_FROM: lambda day: Item.purchase_date >= day,
    ClauseKind.PURCHASED_TO: lambda day: Item.purchase_date <= day,
    ClauseKind.PRICE_MIN: lambda price: Item.purchase_price >= price,
    ClauseKind.PRICE_MAX: lambda price: Item.purchase_price <= price,
}


@dataclass(frozen=True)
class Predicate:
    kind: ClauseKind
    value: Any

    def clause(self) -> ColumnElement[bool]:
        return CLAUSE_BUILDERS[self.kind](self.value)


@dataclass(frozen=True)
class FilterPlan:
    predicates: tuple[Predicate, ...]

    @property
    def kinds(self) -> tuple[ClauseKind, ...]:
        return tuple(p.kind for p in self.predicates)

    @property
    def values(self) -> tuple[Any, ...]:
        return tuple(p.value for p in self.predicates)

    def clauses(self) -> list[ColumnElement[bool]]:
        """WHERE clauses in plan order; the query combines them with AND."""
        return [p.clause() for p in self.predicates]


def build_predicates(scope: frozenset[int], request: ReportRequest) -> FilterPlan:
    """
    Builds the filter plan for a validated request.

    The scope restriction always comes first; each optional filter present on
    the request adds exactly one more predicate.

    Args:
        scope: Inventory ids the caller may read.
        request: The validated report request.

    Returns:
        FilterPlan: Ordered predicates with their bound values.
    """
    predicates = [Predicate(ClauseKind.SCOPE, tuple(sorted(scope)))]

    if request.inventory_id is not None:
        predicates.append(Predicate(ClauseKind.INVENTORY, request.inventory_id))
    if request.category is not None:
        predicates.append(Predicate(ClauseKind.CATEGORY, request.category))
    if request.location is not None:
        predicates.append(Predicate(ClauseKind.LOCATION, f"%{escape_like(request.location)}%"))
    if request.from_date is not None:
        predicates.append(Predicate(ClauseKind.PURCHASED_FROM, request.from_date))
    if request.to_date is not None:
        predicates.append(Predicate(ClauseKind.PURCHASED_TO, request.to_date))
    if request.min_price is not None:
        predicates.append(Predicate(ClauseKind.PRICE_MIN, request.min_price))
    if request.max_price is not None:
        predicates.append(Predicate(ClauseKind.PRICE_MAX, request.max_price))

    return FilterPlan(predicates=tuple(predicates))
