from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.errors import ValidationFailed
from orderflow.db.models.sales import Customer, Order
from orderflow.repositories.inventory import InventoryRepository, StockMovementRepository
from orderflow.schemas.reports import (
    Activity,
    DashboardRead,
    LowStockAlert,
    OrdersSummary,
    SalesSummary,
)
from orderflow.services.base import BaseService

PERIOD_DAYS: Dict[str, int] = {"week": 7, "month": 30, "quarter": 90, "year": 365}

# Orders whose revenue is realised.
REVENUE_STATUSES = ("completed", "delivered")


class DashboardService(BaseService):
    """Aggregates for the dashboard; every figure is limited to one company."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.inventory = InventoryRepository(session)
        self.movements = StockMovementRepository(session)

    # PUBLIC_INTERFACE
    async def dashboard(
        self, company_id: UUID, period: str = "month", now: Optional[datetime] = None
    ) -> DashboardRead:
        """
        Build the dashboard for the trailing period.

        Revenue growth compares the period with the one of equal length just before
        it and is 0 when that previous period had no revenue.
        """
        if period not in PERIOD_DAYS:
            raise ValidationFailed(f"Invalid period: {period}", details="Use one of week, month, quarter, year")
        now = now or datetime.now(tz=timezone.utc)
        start = now - timedelta(days=PERIOD_DAYS[period])
        previous_start = start - timedelta(days=PERIOD_DAYS[period])

        by_status = await self._orders_by_status(company_id, start, now)
        revenue, revenue_orders = await self._revenue(company_id, start, now)
        previous_revenue, _ = await self._revenue(company_id, previous_start, start)
        growth = ((revenue - previous_revenue) / previous_revenue * 100) if previous_revenue > 0 else 0.0

        return DashboardRead(
            period=period,
            orders_summary=OrdersSummary(total=sum(by_status.values()), by_status=by_status),
            sales_summary=SalesSummary(
                total_revenue=round(revenue, 2),
                average_order_value=round(revenue / revenue_orders, 2) if revenue_orders else 0.0,
                growth_rate=round(growth, 2),
            ),
            low_stock_alerts=[
                LowStockAlert.model_validate(row) for row in await self.inventory.low_stock(company_id)
            ],
            recent_activities=await self._recent_activities(company_id),
        )

    async def _orders_by_status(self, company_id: UUID, start: datetime, end: datetime) -> Dict[str, int]:
        res = await self.session.execute(
            select(Order.status, func.count(Order.id))
            .where(Order.company_id == company_id, Order.created_at >= start, Order.created_at < end)
            .group_by(Order.status)
        )
        return {status: int(count) for status, count in res.all()}

    async def _revenue(self, company_id: UUID, start: datetime, end: datetime):
        res = await self.session.execute(
            select(func.coalesce(func.sum(Order.total), 0), func.count(Order.id)).where(
                Order.company_id == company_id,
                Order.status.in_(REVENUE_STATUSES),
                Order.created_at >= start,
                Order.created_at < end,
            )
        )
        total, count = res.one()
        return float(total or 0), int(count or 0)

    async def _recent_activities(self, company_id: UUID, limit: int = 5) -> List[Activity]:
        res = await self.session.execute(
            select(Order.order_number, Order.status, Order.created_at, Customer.name)
            .outerjoin(Customer, Order.customer_id == Customer.id)
            .where(Order.company_id == company_id)
            .order_by(Order.created_at.desc())
            .limit(limit)
        )
        activities = [
            Activity(type="order", description=f"Order {number} ({customer}) - {status}", timestamp=created_at)
            for number, status, created_at, customer in res.all()
        ]
        for movement in await self.movements.recent(company_id, limit):
            activities.append(
                Activity(
                    type="stock_movement",
                    description=f"Stock {movement.type} of {float(movement.quantity):g} {movement.inventory.unit} on {movement.inventory.name}",
                    timestamp=movement.created_at,
                )
            )
        activities.sort(key=lambda a: _aware(a.timestamp), reverse=True)
        return activities[: limit * 2]


def _aware(value: datetime) -> datetime:
    # SQLite returns naive datetimes for timezone-aware columns.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
