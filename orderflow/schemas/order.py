from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from orderflow.schemas.customer import CustomerSummary
from orderflow.schemas.product import ProductSummary

OrderStatus = Literal[
    "draft",
    "pending",
    "confirmed",
    "in_production",
    "ready",
    "delivered",
    "completed",
    "cancelled",
]
DeliveryMethod = Literal["delivery", "pickup"]


class OrderItemCreate(BaseModel):
    """One requested order line."""
    product_id: UUID = Field(..., description="Product ordered")
    quantity: int = Field(..., ge=1, description="Units ordered")
    unit_price: float = Field(..., ge=0, description="Price per unit")
    discount: float = Field(0, ge=0, description="Discount on the whole line")
    customizations: Dict[str, Any] = Field(default_factory=dict)
    notes: str = Field("")

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity - self.discount, 2)


class OrderCreate(BaseModel):
    """Create order payload with at least one line."""
    customer_id: UUID = Field(..., description="Ordering customer")
    order_date: Optional[date] = Field(None, description="Defaults to today")
    due_date: Optional[date] = None
    delivery_date: Optional[date] = None
    delivery_address: Optional[str] = None
    delivery_method: DeliveryMethod = Field("pickup")
    discount: float = Field(0, ge=0)
    tax_rate: float = Field(0, ge=0, le=100)
    notes: str = Field("")
    special_instructions: str = Field("")
    items: List[OrderItemCreate] = Field(..., min_length=1, description="Order lines")


class OrderUpdate(BaseModel):
    """Partial order header update; lines are not editable."""
    customer_id: Optional[UUID] = None
    status: Optional[OrderStatus] = None
    order_date: Optional[date] = None
    due_date: Optional[date] = None
    delivery_date: Optional[date] = None
    delivery_address: Optional[str] = None
    delivery_method: Optional[DeliveryMethod] = None
    discount: Optional[float] = Field(None, ge=0)
    tax_rate: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    special_instructions: Optional[str] = None


class OrderFilters(BaseModel):
    """Query filters for the order list."""
    status: Optional[OrderStatus] = None
    customer_id: Optional[UUID] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class OrderItemRead(BaseModel):
    """Order line read model."""
    id: UUID
    product_id: UUID
    quantity: int
    unit_price: float
    discount: float
    line_total: float
    customizations: Dict[str, Any] = Field(default_factory=dict)
    notes: str = ""
    product: Optional[ProductSummary] = None

    class Config:
        from_attributes = True


class OrderListItem(BaseModel):
    """Order row in list responses."""
    id: UUID
    order_number: str
    status: str
    total: float
    order_date: date
    created_at: datetime
    customer: Optional[CustomerSummary] = None

    class Config:
        from_attributes = True


class OrderRead(OrderListItem):
    """Order with its lines and monetary breakdown."""
    customer_id: UUID
    due_date: Optional[date] = None
    delivery_date: Optional[date] = None
    delivery_address: Optional[str] = None
    delivery_method: str
    subtotal: float
    discount: float
    tax_rate: float
    tax_amount: float
    notes: str
    special_instructions: str
    updated_at: datetime
    items: List[OrderItemRead] = Field(default_factory=list)
