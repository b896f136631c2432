from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Numeric, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orderflow.db.base import Base, CompanyMixin, CreatedAtMixin, TimestampMixin, UUIDPkMixin
from orderflow.db.models.catalog import Product
from orderflow.db.models.sales import Order

Quantity = Numeric(14, 3, asdecimal=False)


class Inventory(UUIDPkMixin, CompanyMixin, TimestampMixin, Base):
    """Stock-tracked raw material or finished product."""
    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="stock_non_negative"),
        CheckConstraint("type IN ('finished_product','raw_material')", name="type_valid"),
    )

    product_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)  # finished_product / raw_material
    unit: Mapped[str] = mapped_column(Text, nullable=False, default="piece")
    current_stock: Mapped[float] = mapped_column(Quantity, nullable=False, default=0)
    min_stock_level: Mapped[float] = mapped_column(Quantity, nullable=False, default=0)
    max_stock_level: Mapped[Optional[float]] = mapped_column(Quantity, nullable=True)
    cost_per_unit: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    supplier: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    product: Mapped[Optional[Product]] = relationship("Product")


class StockMovement(UUIDPkMixin, CompanyMixin, CreatedAtMixin, Base):
    """Append-only stock event against one inventory row."""
    __tablename__ = "stock_movements"
    __table_args__ = (
        CheckConstraint("type IN ('in','out','adjustment')", name="type_valid"),
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
    )

    inventory_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("inventory.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("orders.id", ondelete="SET NULL"), nullable=True
    )
    type: Mapped[str] = mapped_column(Text, nullable=False)  # in / out / adjustment
    quantity: Mapped[float] = mapped_column(Quantity, nullable=False)
    unit_cost: Mapped[Optional[float]] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    reference: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    inventory: Mapped[Inventory] = relationship("Inventory")
    order: Mapped[Optional[Order]] = relationship("Order")


class Recipe(UUIDPkMixin, CompanyMixin, CreatedAtMixin, Base):
    """Bill-of-materials edge: a finished product consumes an ingredient."""
    __tablename__ = "recipes"

    finished_product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("inventory.id", ondelete="CASCADE"), nullable=False
    )
    ingredient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("inventory.id", ondelete="CASCADE"), nullable=False
    )
    quantity_needed: Mapped[float] = mapped_column(Quantity, nullable=False)
    unit: Mapped[str] = mapped_column(Text, nullable=False, default="piece")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
