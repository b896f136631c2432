from __future__ import annotations

import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.errors import Conflict, Forbidden
from orderflow.db.models.company import Company
from orderflow.repositories.company import CompanyRepository
from orderflow.schemas.auth import LoginRequest, SignupRequest
from orderflow.services.base import BaseService
from orderflow.services.identity import AuthSession, Identity, IdentityProvider

logger = logging.getLogger(__name__)

# PostgreSQL reports the constraint name, SQLite the table.column pair.
_DUPLICATE_EMAIL_MARKERS = ("uq_app_users_email", "app_users.email")


def _is_duplicate_email(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return any(marker in message for marker in _DUPLICATE_EMAIL_MARKERS)


class AuthService(BaseService):
    """
    Signup and login workflows.

    Signup creates the identity and its company in a single transaction: when the
    company insert fails, no account is left behind.
    """

    def __init__(self, session: AsyncSession, identity_provider: IdentityProvider) -> None:
        super().__init__(session)
        self.identity_provider = identity_provider
        self.company_repo = CompanyRepository(session)

    # PUBLIC_INTERFACE
    async def signup(self, payload: SignupRequest) -> Tuple[Identity, Company]:
        """
        Register an account and its company.

        Raises:
            Conflict: the email is already registered.
        """
        try:
            identity = await self.identity_provider.create_user(payload.email, payload.password)
            company = await self.company_repo.create_company(
                user_id=identity.id,
                values={
                    "name": payload.company_name,
                    "email": payload.company_email,
                    "phone": payload.company_phone,
                    "address": payload.company_address,
                    "business_type": payload.business_type,
                    "inventory_management": payload.inventory_management,
                    "inventory_type": payload.inventory_type,
                    "currency": payload.currency,
                    "timezone": payload.timezone,
                },
            )
            await self.company_repo.commit()
        except IntegrityError as exc:
            await self.company_repo.rollback()
            if not _is_duplicate_email(exc):
                raise
            logger.warning("Signup rejected for %s: email already registered", payload.email)
            raise Conflict("User already registered") from exc
        except Exception:
            await self.company_repo.rollback()
            raise
        logger.info("Signed up user %s with company %s", identity.id, company.id)
        return identity, company

    # PUBLIC_INTERFACE
    async def login(self, payload: LoginRequest) -> Tuple[AuthSession, Company]:
        """
        Authenticate and return the token pair with the caller's company.

        Raises:
            Unauthenticated: bad credentials.
            Forbidden: the identity owns no company.
        """
        auth = await self.identity_provider.sign_in(payload.email, payload.password)
        company = await self.company_repo.get_by_user_id(auth.identity.id)
        if company is None:
            raise Forbidden()
        return auth, company
