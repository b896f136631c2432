from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

InventoryType = Literal["finished_product", "raw_material"]
MovementType = Literal["in", "out", "adjustment"]


class InventoryCreate(BaseModel):
    """Create inventory row payload."""
    product_id: Optional[UUID] = Field(None, description="Linked product, if any")
    name: str = Field(..., min_length=1)
    type: InventoryType = Field(..., description="finished_product or raw_material")
    unit: str = Field("piece")
    current_stock: float = Field(0, ge=0, description="Opening stock")
    min_stock_level: float = Field(0, ge=0)
    max_stock_level: Optional[float] = Field(None, ge=0)
    cost_per_unit: float = Field(0, ge=0)
    supplier: Optional[str] = None
    location: Optional[str] = None
    is_active: bool = Field(True)


class InventoryUpdate(BaseModel):
    """
    Partial inventory update.

    current_stock is intentionally absent: stock only changes through movements.
    """
    product_id: Optional[UUID] = None
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[InventoryType] = None
    unit: Optional[str] = None
    min_stock_level: Optional[float] = Field(None, ge=0)
    max_stock_level: Optional[float] = Field(None, ge=0)
    cost_per_unit: Optional[float] = Field(None, ge=0)
    supplier: Optional[str] = None
    location: Optional[str] = None
    is_active: Optional[bool] = None


class InventoryFilters(BaseModel):
    """Query filters for the inventory list."""
    type: Optional[InventoryType] = None
    low_stock: Optional[bool] = None
    is_active: Optional[bool] = None


class LinkedProduct(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class InventoryRead(BaseModel):
    """Inventory read model."""
    id: UUID
    company_id: UUID
    product_id: Optional[UUID] = None
    name: str
    type: str
    unit: str
    current_stock: float
    min_stock_level: float
    max_stock_level: Optional[float] = None
    cost_per_unit: float
    supplier: Optional[str] = None
    location: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    product: Optional[LinkedProduct] = None

    class Config:
        from_attributes = True


class StockMovementCreate(BaseModel):
    """Record a stock movement; adjustment sets the stock to quantity."""
    type: MovementType = Field(..., description="in, out or adjustment")
    quantity: float = Field(..., ge=0)
    order_id: Optional[UUID] = Field(None, description="Originating order")
    unit_cost: Optional[float] = Field(None, ge=0, description="Defaults to the row's cost_per_unit")
    reference: Optional[str] = None
    reason: Optional[str] = None
    notes: str = Field("")


class MovementOrder(BaseModel):
    id: UUID
    order_number: str

    class Config:
        from_attributes = True


class StockMovementRead(BaseModel):
    """Stock movement read model."""
    id: UUID
    company_id: UUID
    inventory_id: UUID
    order_id: Optional[UUID] = None
    type: str
    quantity: float
    unit_cost: Optional[float] = None
    reference: Optional[str] = None
    reason: Optional[str] = None
    notes: str
    created_at: datetime
    order: Optional[MovementOrder] = None

    class Config:
        from_attributes = True
