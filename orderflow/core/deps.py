from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Depends, Query, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.errors import Forbidden, Unauthenticated
from orderflow.core.logging import company_id_var
from orderflow.db.session import get_async_session
from orderflow.repositories.company import CompanyRepository
from orderflow.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, PageParams
from orderflow.services.identity import IdentityProvider, LocalIdentityProvider

logger = logging.getLogger(__name__)

# OAuth2 bearer (used by docs); missing headers are reported by get_auth_context
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller and the company all of its requests are scoped to."""
    user_id: UUID
    email: str
    company_id: UUID


# PUBLIC_INTERFACE
async def get_identity_provider(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
) -> IdentityProvider:
    """Return the identity provider for this request, signing tokens with the app's settings."""
    return LocalIdentityProvider(session, settings=request.app.state.settings)


# PUBLIC_INTERFACE
async def get_auth_context(
    token: Optional[str] = Depends(oauth2_scheme),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    session: AsyncSession = Depends(get_async_session),
) -> AuthContext:
    """
    Resolve the bearer token to an identity and its company.

    Raises:
        Unauthenticated: 401 when the token is missing, invalid, or names no identity.
        Forbidden: 403 when the identity owns no company.
    """
    if not token:
        raise Unauthenticated()
    identity = await identity_provider.get_identity(token)
    if identity is None:
        raise Unauthenticated("Invalid or expired token")
    company = await CompanyRepository(session).get_by_user_id(identity.id)
    if company is None:
        logger.warning("Identity %s has no company", identity.id)
        raise Forbidden()
    company_id_var.set(str(company.id))
    return AuthContext(user_id=identity.id, email=identity.email, company_id=company.id)


# PUBLIC_INTERFACE
def page_params(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, description=f"Page size, at most {MAX_PAGE_SIZE}"),
) -> PageParams:
    """Pagination query parameters; limits above the maximum are clamped."""
    return PageParams(page=page, limit=min(limit, MAX_PAGE_SIZE))
