from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.deps import AuthContext, get_auth_context, page_params
from orderflow.core.errors import NotFound
from orderflow.db.session import get_async_session
from orderflow.repositories.catalog import ProductRepository
from orderflow.schemas.common import Page, PageParams, PaginationMeta, update_values
from orderflow.schemas.product import ProductCreate, ProductRead, ProductUpdate

router = APIRouter(prefix="/products", tags=["Products"])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=Page[ProductRead],
    summary="List products",
    description="Paginated products of the caller's company, newest first.",
)
async def list_products(
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
    params: PageParams = Depends(page_params),
    category: Optional[str] = Query(None, description="Filter by category"),
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    track_inventory: Optional[bool] = Query(None, description="Filter by inventory tracking"),
    search: Optional[str] = Query(None, description="Case-insensitive match on name or SKU"),
) -> Page[ProductRead]:
    rows, total = await ProductRepository(session).list_products(
        ctx.company_id,
        params,
        category=category,
        is_active=is_active,
        track_inventory=track_inventory,
        search=search,
    )
    return Page[ProductRead](
        data=[ProductRead.model_validate(r) for r in rows],
        pagination=PaginationMeta.build(page=params.page, limit=params.limit, total=total),
    )


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create product",
)
async def create_product(
    payload: ProductCreate,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> ProductRead:
    row = await ProductRepository(session).create_product(ctx.company_id, payload)
    return ProductRead.model_validate(row)


# PUBLIC_INTERFACE
@router.get("/{product_id}", response_model=ProductRead, summary="Get product")
async def get_product(
    product_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> ProductRead:
    row = await ProductRepository(session).get_product(ctx.company_id, product_id)
    if row is None:
        raise NotFound("Product not found")
    return ProductRead.model_validate(row)


# PUBLIC_INTERFACE
@router.put("/{product_id}", response_model=ProductRead, summary="Update product")
async def update_product(
    product_id: UUID,
    payload: ProductUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> ProductRead:
    repo = ProductRepository(session)
    row = await repo.get_product(ctx.company_id, product_id)
    if row is None:
        raise NotFound("Product not found")
    row = await repo.update_product(row, update_values(payload, nullable=("sku",)))
    return ProductRead.model_validate(row)


# PUBLIC_INTERFACE
@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete product",
)
async def delete_product(
    product_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> Response:
    repo = ProductRepository(session)
    row = await repo.get_product(ctx.company_id, product_id)
    if row is None:
        raise NotFound("Product not found")
    await repo.delete_product(row)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
