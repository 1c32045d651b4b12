"""Inventory Report API Schemas

This module defines the Pydantic models used by the inventory report
endpoints:

1. Raw query parameters as received from the client
2. The validated report request (filters, sort, output format)
3. Statistics and per-category breakdown blocks
4. The full report result and the standard response envelope

Query parameters are accepted as plain strings and validated into
``ReportRequest`` by the report service, so a malformed value is reported
as a report validation error rather than a framework-level 422."""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Generic, List, Optional, TypeVar
from enum import Enum
import datetime

from ..inventory.schemas import ItemResponse

MAX_PRICE = 1_000_000_000.0
DATE_FORMAT = "%Y-%m-%d"


class ReportFormat(str, Enum):
    """Output encodings for an inventory report."""
    JSON = "json"  # structured document
    CSV = "csv"    # flat tabular text


class ReportQueryParams(BaseModel):
    inventory_id: Optional[str] = Field(None, description="Only include items from this inventory")
    category: Optional[str] = Field(None, description="Exact category to match")
    location: Optional[str] = Field(None, description="Case-insensitive substring of the item location")
    from_date: Optional[str] = Field(None, description="Earliest purchase date (YYYY-MM-DD, inclusive)")
    to_date: Optional[str] = Field(None, description="Latest purchase date (YYYY-MM-DD, inclusive)")
    min_price: Optional[str] = Field(None, description="Lowest purchase price (inclusive)")
    max_price: Optional[str] = Field(None, description="Highest purchase price (inclusive)")
    sort_by: Optional[str] = Field(None, description="name, price, date, category or created (default)")
    sort_order: Optional[str] = Field(None, description="asc or desc (default)")
    format: Optional[str] = Field(None, description="json (default) or csv")


class ReportRequest(BaseModel):
    inventory_id: Optional[int] = Field(None, ge=1)
    category: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=500)
    from_date: Optional[datetime.date] = None
    to_date: Optional[datetime.date] = None
    min_price: Optional[float] = Field(None, ge=0, le=MAX_PRICE, allow_inf_nan=False)
    max_price: Optional[float] = Field(None, ge=0, le=MAX_PRICE, allow_inf_nan=False)
    sort_by: Optional[str] = Field(None, max_length=50)
    sort_order: Optional[str] = Field(None, max_length=10)
    format: ReportFormat = ReportFormat.JSON

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def blank_means_absent(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None and value != ""}
        return data

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def parse_calendar_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return datetime.datetime.strptime(value, DATE_FORMAT).date()
            except ValueError:
                raise ValueError(f"'{value}' is not a valid date, expected YYYY-MM-DD")
        return value

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def check_ranges(self) -> "ReportRequest":
        if self.from_date and self.to_date and self.to_date < self.from_date:
            raise ValueError("to_date must not be earlier than from_date")
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.max_price < self.min_price
        ):
            raise ValueError("max_price must not be less than min_price")
        return self


class InventoryStatistics(BaseModel):
    total_items: int
    total_value: float
    total_quantity: int
    category_count: int
    inventories_count: int
    oldest_item_date: Optional[datetime.date] = None
    newest_item_date: Optional[datetime.date] = None
    average_item_value: float


class CategoryBreakdown(BaseModel):
    category: str
    item_count: int
    total_quantity: int
    total_value: float
    percentage_of_total: float


class InventoryReportData(BaseModel):
    statistics: InventoryStatistics
    category_breakdown: List[CategoryBreakdown]
    items: List[ItemResponse]
    generated_at: datetime.datetime
    filters_applied: ReportRequest


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard response envelope."""
    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None
