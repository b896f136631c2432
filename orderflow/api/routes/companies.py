from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.deps import AuthContext, get_auth_context
from orderflow.core.errors import NotFound
from orderflow.db.session import get_async_session
from orderflow.repositories.company import CompanyRepository
from orderflow.schemas.common import update_values
from orderflow.schemas.company import CompanyRead, CompanyUpdate

router = APIRouter(prefix="/companies", tags=["Companies"])


# PUBLIC_INTERFACE
@router.get(
    "/{company_id}",
    response_model=CompanyRead,
    summary="Get company",
    description="Return the caller's company. Any other id yields 404.",
)
async def get_company(
    company_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> CompanyRead:
    company = await CompanyRepository(session).get_owned(company_id, ctx.user_id)
    if company is None:
        raise NotFound("Company not found")
    return CompanyRead.model_validate(company)


# PUBLIC_INTERFACE
@router.put(
    "/{company_id}",
    response_model=CompanyRead,
    summary="Update company",
    description="Partially update the caller's company settings.",
)
async def update_company(
    company_id: UUID,
    payload: CompanyUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> CompanyRead:
    """Apply the provided fields; omitted fields are left unchanged."""
    repo = CompanyRepository(session)
    company = await repo.get_owned(company_id, ctx.user_id)
    if company is None:
        raise NotFound("Company not found")
    values = update_values(payload, nullable=("email", "phone", "address"))
    company = await repo.update_company(company, values)
    return CompanyRead.model_validate(company)
