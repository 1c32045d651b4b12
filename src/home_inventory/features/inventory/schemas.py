from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
import datetime


class ItemResponse(BaseModel):
    """Canonical item shape returned by reports and exports."""

    id: int = Field(..., description="Item identifier")
    inventory_id: int = Field(..., description="Identifier of the inventory that owns the item")
    name: str = Field(..., description="Name of the item")
    description: Optional[str] = Field(None, description="Free-form description")
    category: Optional[str] = Field(None, description="Category label, if any")
    location: Optional[str] = Field(None, description="Where the item is kept")
    purchase_date: Optional[datetime.date] = Field(None, description="Date of purchase (YYYY-MM-DD)")
    purchase_price: Optional[float] = Field(None, ge=0, description="Unit purchase price")
    warranty_expiry: Optional[datetime.date] = Field(None, description="Warranty expiry date (YYYY-MM-DD)")
    notes: Optional[str] = Field(None, description="Additional notes")
    quantity: int = Field(default=1, ge=0, description="Number of units owned")
    created_at: Optional[datetime.datetime] = Field(None, description="Timestamp of when the item was created")
    updated_at: Optional[datetime.datetime] = Field(None, description="Timestamp of when the item was last updated")

    model_config = ConfigDict(
        from_attributes=True,
        protected_namespaces=(),
    )
