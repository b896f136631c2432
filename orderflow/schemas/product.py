from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    """Create product payload."""
    name: str = Field(..., min_length=1, description="Product name")
    description: str = Field("")
    price: float = Field(..., ge=0, description="Unit price")
    sku: Optional[str] = Field(None)
    unit: str = Field("piece")
    category: str = Field("general")
    attributes: Dict[str, Any] = Field(default_factory=dict)
    track_inventory: bool = Field(False)
    stock_quantity: int = Field(0, ge=0)
    min_stock_level: int = Field(0, ge=0)
    is_active: bool = Field(True)


class ProductUpdate(BaseModel):
    """Partial product update."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    sku: Optional[str] = None
    unit: Optional[str] = None
    category: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None
    track_inventory: Optional[bool] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    min_stock_level: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ProductRead(BaseModel):
    """Product read model."""
    id: UUID
    company_id: UUID
    name: str
    description: str
    price: float
    sku: Optional[str] = None
    unit: str
    category: str
    attributes: Dict[str, Any] = Field(default_factory=dict)
    track_inventory: bool
    stock_quantity: int
    min_stock_level: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProductSummary(BaseModel):
    """Product fields embedded in order lines."""
    id: UUID
    name: str
    unit: str
    description: Optional[str] = None

    class Config:
        from_attributes = True
