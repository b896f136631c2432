from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class CompanyCreate(BaseModel):
    """Company attributes captured at signup."""
    name: str = Field(..., min_length=1, description="Company name")
    email: Optional[EmailStr] = Field(None)
    phone: Optional[str] = Field(None)
    address: Optional[str] = Field(None)
    business_type: Literal["custom_orders", "wholesale"] = Field("custom_orders")
    inventory_management: bool = Field(False)
    inventory_type: Literal["finished_products", "raw_materials"] = Field("finished_products")
    currency: str = Field("EUR")
    timezone: str = Field("Europe/Paris")


class CompanyUpdate(BaseModel):
    """Partial company update."""
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = Field(None)
    phone: Optional[str] = Field(None)
    address: Optional[str] = Field(None)
    business_type: Optional[Literal["custom_orders", "wholesale"]] = Field(None)
    inventory_management: Optional[bool] = Field(None)
    inventory_type: Optional[Literal["finished_products", "raw_materials"]] = Field(None)
    currency: Optional[str] = Field(None)
    timezone: Optional[str] = Field(None)


class CompanyRead(BaseModel):
    """Company read model."""
    id: UUID = Field(..., description="Company ID")
    user_id: UUID = Field(..., description="Owning account")
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    business_type: str
    inventory_management: bool
    inventory_type: str
    currency: str
    timezone: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
