from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.deps import AuthContext, get_auth_context, page_params
from orderflow.core.errors import NotFound
from orderflow.db.session import get_async_session
from orderflow.repositories.sales import OrderRepository
from orderflow.schemas.common import Page, PageParams, PaginationMeta
from orderflow.schemas.order import (
    OrderCreate,
    OrderFilters,
    OrderListItem,
    OrderRead,
    OrderStatus,
    OrderUpdate,
)
from orderflow.services.orders import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


def order_filters(
    status: Optional[OrderStatus] = Query(None, description="Filter by status"),
    customer_id: Optional[UUID] = Query(None, description="Filter by customer"),
    date_from: Optional[date] = Query(None, description="Earliest order date (inclusive)"),
    date_to: Optional[date] = Query(None, description="Latest order date (inclusive)"),
) -> OrderFilters:
    return OrderFilters(status=status, customer_id=customer_id, date_from=date_from, date_to=date_to)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=Page[OrderListItem],
    summary="List orders",
    description="Paginated orders of the caller's company with their customer, newest first.",
)
async def list_orders(
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
    params: PageParams = Depends(page_params),
    filters: OrderFilters = Depends(order_filters),
) -> Page[OrderListItem]:
    rows, total = await OrderRepository(session).list_orders(ctx.company_id, params, filters)
    return Page[OrderListItem](
        data=[OrderListItem.model_validate(r) for r in rows],
        pagination=PaginationMeta.build(page=params.page, limit=params.limit, total=total),
    )


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description=(
        "Create an order with at least one line. Line totals and order totals are computed "
        "server-side; the order starts in draft."
    ),
)
async def create_order(
    payload: OrderCreate,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> OrderRead:
    """
    Create an order for one of the company's customers.

    Returns:
        OrderRead: the stored order with customer and lines.
    """
    order = await OrderService(session).create_order(ctx.company_id, payload)
    return OrderRead.model_validate(order)


# PUBLIC_INTERFACE
@router.get("/{order_id}", response_model=OrderRead, summary="Get order")
async def get_order(
    order_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> OrderRead:
    order = await OrderRepository(session).get_order_detail(ctx.company_id, order_id)
    if order is None:
        raise NotFound("Order not found")
    return OrderRead.model_validate(order)


# PUBLIC_INTERFACE
@router.put(
    "/{order_id}",
    response_model=OrderRead,
    summary="Update order",
    description="Partially update an order header. Status changes must follow the order lifecycle.",
)
async def update_order(
    order_id: UUID,
    payload: OrderUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> OrderRead:
    order = await OrderService(session).update_order(ctx.company_id, order_id, payload)
    return OrderRead.model_validate(order)


# PUBLIC_INTERFACE
@router.delete(
    "/{order_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete order",
    description="Delete an order and its lines. Completed and delivered orders are kept.",
)
async def delete_order(
    order_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> Response:
    await OrderService(session).delete_order(ctx.company_id, order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
