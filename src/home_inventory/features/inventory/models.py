"""Data models for the home inventory: inventories, their items, and the two
ways an account can be given read access to someone else's inventories."""

import datetime
import uuid
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...common.models import TimestampMixin
from ...core.database import Base

SHARE_PERMISSION_LEVELS = ("view", "edit_items", "edit_inventory")


class Inventory(TimestampMixin, Base):
    __tablename__ = "inventories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )

    def __str__(self):
        return self.name


class Item(TimestampMixin, Base):
    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    inventory_id: Mapped[int] = mapped_column(
        ForeignKey("inventories.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    location: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, index=True)
    purchase_date: Mapped[Optional[datetime.date]] = mapped_column(Date, nullable=True)
    purchase_price: Mapped[Optional[float]] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=True
    )
    warranty_expiry: Mapped[Optional[datetime.date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, default=1)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
        CheckConstraint(
            "purchase_price IS NULL OR purchase_price >= 0",
            name="purchase_price_non_negative",
        ),
    )

    def __str__(self):
        return f"{self.name} (Qty: {self.quantity})"


class InventoryShare(TimestampMixin, Base):
    """Read access to one inventory for one account."""

    __tablename__ = "inventory_shares"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    inventory_id: Mapped[int] = mapped_column(
        ForeignKey("inventories.id", ondelete="CASCADE"), index=True
    )
    shared_with_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    shared_by_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    permission_level: Mapped[str] = mapped_column(String(20), default="view")

    __table_args__ = (
        UniqueConstraint("inventory_id", "shared_with_user_id", name="inventory_grantee"),
        CheckConstraint(
            "permission_level IN ('view', 'edit_items', 'edit_inventory')",
            name="permission_level",
        ),
    )


class UserAccessGrant(TimestampMixin, Base):
    """Read access to every inventory owned by the grantor, present and future."""

    __tablename__ = "user_access_grants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    grantor_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    grantee_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )

    __table_args__ = (
        UniqueConstraint("grantor_user_id", "grantee_user_id", name="grantor_grantee"),
        CheckConstraint("grantor_user_id != grantee_user_id", name="no_self_grant"),
    )
