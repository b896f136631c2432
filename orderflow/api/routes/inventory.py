from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.deps import AuthContext, get_auth_context, page_params
from orderflow.core.errors import NotFound
from orderflow.db.session import get_async_session
from orderflow.repositories.catalog import ProductRepository
from orderflow.repositories.inventory import InventoryRepository, StockMovementRepository
from orderflow.schemas.common import Page, PageParams, PaginationMeta, update_values
from orderflow.schemas.inventory import (
    InventoryCreate,
    InventoryFilters,
    InventoryRead,
    InventoryType,
    InventoryUpdate,
    StockMovementCreate,
    StockMovementRead,
)
from orderflow.services.inventory import StockMovementService

router = APIRouter(prefix="/inventory", tags=["Inventory"])

_NULLABLE = ("product_id", "max_stock_level", "supplier", "location")


def inventory_filters(
    type: Optional[InventoryType] = Query(None, description="finished_product or raw_material"),
    low_stock: Optional[bool] = Query(None, description="Only rows below their minimum level"),
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
) -> InventoryFilters:
    return InventoryFilters(type=type, low_stock=low_stock, is_active=is_active)


async def _ensure_product(session: AsyncSession, company_id: UUID, product_id: Optional[UUID]) -> None:
    if product_id is not None and await ProductRepository(session).get_product(company_id, product_id) is None:
        raise NotFound("Product not found")


async def _get_row(session: AsyncSession, company_id: UUID, inventory_id: UUID):
    row = await InventoryRepository(session).get_inventory(company_id, inventory_id)
    if row is None:
        raise NotFound("Inventory item not found")
    return row


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=Page[InventoryRead],
    summary="List inventory",
    description="Paginated inventory rows of the caller's company, newest first.",
)
async def list_inventory(
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
    params: PageParams = Depends(page_params),
    filters: InventoryFilters = Depends(inventory_filters),
) -> Page[InventoryRead]:
    rows, total = await InventoryRepository(session).list_inventory(ctx.company_id, params, filters)
    return Page[InventoryRead](
        data=[InventoryRead.model_validate(r) for r in rows],
        pagination=PaginationMeta.build(page=params.page, limit=params.limit, total=total),
    )


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=InventoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create inventory item",
)
async def create_inventory(
    payload: InventoryCreate,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> InventoryRead:
    await _ensure_product(session, ctx.company_id, payload.product_id)
    repo = InventoryRepository(session)
    row = await repo.create_inventory(ctx.company_id, payload.model_dump())
    return InventoryRead.model_validate(await _get_row(session, ctx.company_id, row.id))


# PUBLIC_INTERFACE
@router.get("/{inventory_id}", response_model=InventoryRead, summary="Get inventory item")
async def get_inventory(
    inventory_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> InventoryRead:
    return InventoryRead.model_validate(await _get_row(session, ctx.company_id, inventory_id))


# PUBLIC_INTERFACE
@router.put(
    "/{inventory_id}",
    response_model=InventoryRead,
    summary="Update inventory item",
    description="Update inventory attributes. Stock levels change only through movements.",
)
async def update_inventory(
    inventory_id: UUID,
    payload: InventoryUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> InventoryRead:
    row = await _get_row(session, ctx.company_id, inventory_id)
    values = update_values(payload, nullable=_NULLABLE)
    await _ensure_product(session, ctx.company_id, values.get("product_id"))
    await InventoryRepository(session).update_inventory(row, values)
    return InventoryRead.model_validate(await _get_row(session, ctx.company_id, inventory_id))


# PUBLIC_INTERFACE
@router.get(
    "/{inventory_id}/movements",
    response_model=Page[StockMovementRead],
    summary="List stock movements",
    description="Paginated movement history of one inventory row, newest first.",
)
async def list_movements(
    inventory_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
    params: PageParams = Depends(page_params),
) -> Page[StockMovementRead]:
    await _get_row(session, ctx.company_id, inventory_id)
    rows, total = await StockMovementRepository(session).list_movements(ctx.company_id, inventory_id, params)
    return Page[StockMovementRead](
        data=[StockMovementRead.model_validate(r) for r in rows],
        pagination=PaginationMeta.build(page=params.page, limit=params.limit, total=total),
    )


# PUBLIC_INTERFACE
@router.post(
    "/{inventory_id}/movements",
    response_model=StockMovementRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record stock movement",
    description=(
        "Record an in, out or adjustment movement. 'out' movements above the current stock "
        "are rejected with 400 and leave the stock unchanged; 'adjustment' sets the stock."
    ),
)
async def record_movement(
    inventory_id: UUID,
    payload: StockMovementCreate,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> StockMovementRead:
    movement = await StockMovementService(session).record_movement(ctx.company_id, inventory_id, payload)
    return StockMovementRead.model_validate(movement)
