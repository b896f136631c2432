from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import func, select

from orderflow.db.models.security import AppUser
from .base import BaseRepository


class IdentityRepository(BaseRepository):
    """Repository for identity-provider accounts."""

    async def get_user_by_email(self, email: str) -> Optional[AppUser]:
        stmt = select(AppUser).where(func.lower(AppUser.email) == email.lower())
        return await self.scalar_one_or_none(stmt)

    async def get_user_by_id(self, user_id: UUID) -> Optional[AppUser]:
        stmt = select(AppUser).where(AppUser.id == user_id)
        return await self.scalar_one_or_none(stmt)

    async def create_user(self, *, email: str, hashed_password: str) -> AppUser:
        """Stage a new account; the caller commits."""
        user = AppUser(email=email.lower(), hashed_password=hashed_password, is_active=True)
        await self.add(user)
        await self.flush()
        return user
