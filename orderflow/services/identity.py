"""
Identity provider.

The API delegates credential storage and token issuance to an identity provider.
LocalIdentityProvider keeps accounts in the app_users table and signs JWTs with
the configured secret; routes only see the IdentityProvider interface, obtained
through the get_identity_provider dependency.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.errors import Conflict, Unauthenticated
from orderflow.core.security import (
    REFRESH_TOKEN,
    create_access_token,
    create_refresh_token,
    get_password_hash,
    get_token_subject,
    verify_password,
)
from orderflow.core.settings import AppSettings, get_app_settings
from orderflow.repositories.security import IdentityRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    id: UUID
    email: str


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    refresh_token: str
    identity: Identity


class IdentityProvider:
    """Interface of the external identity service."""

    async def create_user(self, email: str, password: str) -> Identity:
        raise NotImplementedError

    async def sign_in(self, email: str, password: str) -> AuthSession:
        raise NotImplementedError

    async def refresh(self, refresh_token: str) -> AuthSession:
        raise NotImplementedError

    async def get_identity(self, access_token: str) -> Optional[Identity]:
        raise NotImplementedError


class LocalIdentityProvider(IdentityProvider):
    """
    Identity provider backed by the application database.

    create_user only stages the account in the session so that the caller can
    commit it together with other rows.
    """

    def __init__(self, session: AsyncSession, settings: Optional[AppSettings] = None) -> None:
        self.repo = IdentityRepository(session)
        self.settings = settings or get_app_settings()

    # PUBLIC_INTERFACE
    async def create_user(self, email: str, password: str) -> Identity:
        """Stage a new account; raises Conflict when the email is taken."""
        if await self.repo.get_user_by_email(email):
            raise Conflict("User already registered")
        user = await self.repo.create_user(email=email, hashed_password=get_password_hash(password))
        return Identity(id=user.id, email=user.email)

    # PUBLIC_INTERFACE
    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Check credentials and issue a token pair."""
        user = await self.repo.get_user_by_email(email)
        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            raise Unauthenticated("Invalid credentials")
        return self._issue(Identity(id=user.id, email=user.email))

    # PUBLIC_INTERFACE
    async def refresh(self, refresh_token: str) -> AuthSession:
        """Exchange a refresh token for a new token pair."""
        subject = get_token_subject(refresh_token, token_type=REFRESH_TOKEN, settings=self.settings)
        identity = await self._load(subject)
        if identity is None:
            raise Unauthenticated("Invalid refresh token")
        return self._issue(identity)

    # PUBLIC_INTERFACE
    async def get_identity(self, access_token: str) -> Optional[Identity]:
        """Resolve an access token to the identity it was issued for, or None."""
        return await self._load(get_token_subject(access_token, settings=self.settings))

    async def _load(self, subject: Optional[str]) -> Optional[Identity]:
        if not subject:
            return None
        try:
            user_id = UUID(subject)
        except ValueError:
            return None
        user = await self.repo.get_user_by_id(user_id)
        if not user or not user.is_active:
            return None
        return Identity(id=user.id, email=user.email)

    def _issue(self, identity: Identity) -> AuthSession:
        subject = str(identity.id)
        return AuthSession(
            access_token=create_access_token(subject=subject, email=identity.email, settings=self.settings),
            refresh_token=create_refresh_token(subject=subject, settings=self.settings),
            identity=identity,
        )


__all__ = ["AuthSession", "Identity", "IdentityProvider", "LocalIdentityProvider"]
