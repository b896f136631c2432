from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import select

from orderflow.db.models.company import Company
from .base import BaseRepository


class CompanyRepository(BaseRepository):
    """Repository for companies (the tenancy root)."""

    async def get_by_user_id(self, user_id: UUID) -> Optional[Company]:
        stmt = select(Company).where(Company.user_id == user_id)
        return await self.scalar_one_or_none(stmt)

    async def get_owned(self, company_id: UUID, user_id: UUID) -> Optional[Company]:
        stmt = select(Company).where(Company.id == company_id, Company.user_id == user_id)
        return await self.scalar_one_or_none(stmt)

    async def create_company(self, *, user_id: UUID, values: Dict[str, Any]) -> Company:
        """Stage a company owned by user_id; the caller commits."""
        company = Company(user_id=user_id, **values)
        await self.add(company)
        await self.flush()
        return company

    async def update_company(self, company: Company, values: Dict[str, Any]) -> Company:
        for field, value in values.items():
            setattr(company, field, value)
        await self.commit()
        return company
