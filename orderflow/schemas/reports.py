from __future__ import annotations

from datetime import datetime
from typing import Dict, List
from uuid import UUID

from pydantic import BaseModel, Field


class OrdersSummary(BaseModel):
    total: int = Field(..., description="Orders created in the period")
    by_status: Dict[str, int] = Field(default_factory=dict)


class SalesSummary(BaseModel):
    total_revenue: float
    average_order_value: float
    growth_rate: float = Field(..., description="Revenue growth vs previous period, in percent")


class LowStockAlert(BaseModel):
    id: UUID
    name: str
    current_stock: float
    min_stock_level: float
    type: str

    class Config:
        from_attributes = True


class Activity(BaseModel):
    type: str = Field(..., description="order or stock_movement")
    description: str
    timestamp: datetime


class DashboardRead(BaseModel):
    """Aggregated dashboard statistics."""
    period: str
    orders_summary: OrdersSummary
    sales_summary: SalesSummary
    low_stock_alerts: List[LowStockAlert] = Field(default_factory=list)
    recent_activities: List[Activity] = Field(default_factory=list)
