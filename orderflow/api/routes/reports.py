from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.deps import AuthContext, get_auth_context
from orderflow.db.session import get_async_session
from orderflow.schemas.reports import DashboardRead
from orderflow.services.reports import DashboardService

router = APIRouter(prefix="/reports", tags=["Reports"])


# PUBLIC_INTERFACE
@router.get(
    "/dashboard",
    response_model=DashboardRead,
    summary="Dashboard statistics",
    description="Order counts, revenue, low-stock alerts and recent activity for the trailing period.",
)
async def get_dashboard(
    period: str = Query("month", description="week, month, quarter or year"),
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> DashboardRead:
    """
    Return dashboard aggregates for the caller's company.

    Unknown periods are rejected with 400.
    """
    return await DashboardService(session).dashboard(ctx.company_id, period)
