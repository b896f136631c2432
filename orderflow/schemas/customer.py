from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class CustomerCreate(BaseModel):
    """Create customer payload."""
    name: str = Field(..., min_length=1, description="Customer name")
    email: Optional[EmailStr] = Field(None)
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = Field("France")
    notes: str = Field("")
    is_active: bool = Field(True)


class CustomerUpdate(BaseModel):
    """Partial customer update."""
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class CustomerRead(BaseModel):
    """Customer read model."""
    id: UUID
    company_id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: str
    notes: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerOrderSummary(BaseModel):
    """Order fields listed on a customer's detail view."""
    id: UUID
    order_number: str
    status: str
    order_date: date
    total: float
    created_at: datetime

    class Config:
        from_attributes = True


class CustomerDetail(CustomerRead):
    """Customer with its orders."""
    orders: List[CustomerOrderSummary] = Field(default_factory=list)


class CustomerSummary(BaseModel):
    """Customer fields embedded in orders."""
    id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

    class Config:
        from_attributes = True
