from __future__ import annotations

import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Numeric, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orderflow.db.base import (
    Base,
    CompanyMixin,
    CreatedAtMixin,
    JSONType,
    TimestampMixin,
    UUIDPkMixin,
)
from orderflow.db.models.catalog import Product

Money = Numeric(12, 2, asdecimal=False)


class Customer(UUIDPkMixin, CompanyMixin, TimestampMixin, Base):
    """A company's client."""
    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[str] = mapped_column(Text, nullable=False, default="France")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)

    orders: Mapped[List["Order"]] = relationship(
        "Order", back_populates="customer", order_by="desc(Order.created_at)"
    )


class Order(UUIDPkMixin, CompanyMixin, TimestampMixin, Base):
    """Sales order header."""
    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("company_id", "order_number", name="uq_orders_company_order_number"),
        CheckConstraint(
            "status IN ('draft','pending','confirmed','in_production','ready','delivered','completed','cancelled')",
            name="status_valid",
        ),
        CheckConstraint("tax_rate >= 0 AND tax_rate <= 100", name="tax_rate_range"),
    )

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    order_number: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="draft")
    order_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    delivery_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    delivery_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    delivery_method: Mapped[str] = mapped_column(Text, nullable=False, default="pickup")
    subtotal: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    discount: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    tax_rate: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False, default=0)
    tax_amount: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    total: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    special_instructions: Mapped[str] = mapped_column(Text, nullable=False, default="")

    customer: Mapped[Customer] = relationship("Customer", back_populates="orders")
    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.created_at",
    )


class OrderItem(UUIDPkMixin, CreatedAtMixin, Base):
    """One line of an order; line_total is computed once at insert."""
    __tablename__ = "order_items"
    __table_args__ = (CheckConstraint("quantity >= 1", name="quantity_positive"),)

    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[float] = mapped_column(Money, nullable=False)
    discount: Mapped[float] = mapped_column(Money, nullable=False, default=0)
    line_total: Mapped[float] = mapped_column(Money, nullable=False)
    customizations: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    order: Mapped[Order] = relationship("Order", back_populates="items")
    product: Mapped[Product] = relationship("Product")
