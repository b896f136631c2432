from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.deps import AuthContext, get_auth_context, page_params
from orderflow.core.errors import BusinessRuleViolation, NotFound
from orderflow.db.session import get_async_session
from orderflow.repositories.sales import CustomerRepository
from orderflow.schemas.common import Page, PageParams, PaginationMeta, update_values
from orderflow.schemas.customer import CustomerCreate, CustomerDetail, CustomerRead, CustomerUpdate

router = APIRouter(prefix="/customers", tags=["Customers"])

_NULLABLE = ("email", "phone", "address", "city", "postal_code")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=Page[CustomerRead],
    summary="List customers",
    description="Paginated customers of the caller's company, newest first.",
)
async def list_customers(
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
    params: PageParams = Depends(page_params),
    search: Optional[str] = Query(None, description="Case-insensitive match on name or email"),
) -> Page[CustomerRead]:
    rows, total = await CustomerRepository(session).list_customers(ctx.company_id, params, search=search)
    return Page[CustomerRead](
        data=[CustomerRead.model_validate(r) for r in rows],
        pagination=PaginationMeta.build(page=params.page, limit=params.limit, total=total),
    )


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=CustomerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create customer",
)
async def create_customer(
    payload: CustomerCreate,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> CustomerRead:
    row = await CustomerRepository(session).create_customer(ctx.company_id, payload)
    return CustomerRead.model_validate(row)


# PUBLIC_INTERFACE
@router.get(
    "/{customer_id}",
    response_model=CustomerDetail,
    summary="Get customer",
    description="Return a customer with its orders, newest first.",
)
async def get_customer(
    customer_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> CustomerDetail:
    row = await CustomerRepository(session).get_customer(ctx.company_id, customer_id, with_orders=True)
    if row is None:
        raise NotFound("Customer not found")
    return CustomerDetail.model_validate(row)


# PUBLIC_INTERFACE
@router.put("/{customer_id}", response_model=CustomerRead, summary="Update customer")
async def update_customer(
    customer_id: UUID,
    payload: CustomerUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> CustomerRead:
    repo = CustomerRepository(session)
    row = await repo.get_customer(ctx.company_id, customer_id)
    if row is None:
        raise NotFound("Customer not found")
    row = await repo.update_customer(row, update_values(payload, nullable=_NULLABLE))
    return CustomerRead.model_validate(row)


# PUBLIC_INTERFACE
@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete customer",
    description="Delete a customer. Customers referenced by orders cannot be deleted.",
)
async def delete_customer(
    customer_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> Response:
    repo = CustomerRepository(session)
    row = await repo.get_customer(ctx.company_id, customer_id)
    if row is None:
        raise NotFound("Customer not found")
    if await repo.has_orders(row.id):
        raise BusinessRuleViolation("Cannot delete customer with associated orders")
    await repo.delete_customer(row)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
