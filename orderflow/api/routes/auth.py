from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.core.deps import AuthContext, get_auth_context, get_identity_provider
from orderflow.core.errors import Forbidden
from orderflow.db.session import get_async_session
from orderflow.repositories.company import CompanyRepository
from orderflow.schemas.auth import (
    LoginCompany,
    LoginRequest,
    LoginResponse,
    MeResponse,
    RefreshRequest,
    SignupCompany,
    SignupRequest,
    SignupResponse,
    TokenPair,
    UserSummary,
)
from orderflow.services.auth import AuthService
from orderflow.services.identity import IdentityProvider

router = APIRouter(prefix="/auth", tags=["Auth"])


# PUBLIC_INTERFACE
@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description="Create an account and the company it owns. Fails with 409 when the email is already registered.",
)
async def signup(
    payload: SignupRequest,
    session: AsyncSession = Depends(get_async_session),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> SignupResponse:
    """Register a new account together with its company."""
    identity, company = await AuthService(session, identity_provider).signup(payload)
    return SignupResponse(
        user=UserSummary(id=identity.id, email=identity.email),
        company=SignupCompany.model_validate(company),
    )


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login",
    description="Authenticate with email and password and receive access/refresh tokens.",
)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_async_session),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> LoginResponse:
    """Authenticate and issue tokens."""
    auth, company = await AuthService(session, identity_provider).login(payload)
    return LoginResponse(
        access_token=auth.access_token,
        refresh_token=auth.refresh_token,
        user=UserSummary(id=auth.identity.id, email=auth.identity.email),
        company=LoginCompany.model_validate(company),
    )


# PUBLIC_INTERFACE
@router.post(
    "/refresh",
    response_model=TokenPair,
    summary="Refresh access token",
    description="Issue a new token pair from a valid refresh token.",
)
async def refresh_token(
    payload: RefreshRequest,
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> TokenPair:
    auth = await identity_provider.refresh(payload.refresh_token)
    return TokenPair(access_token=auth.access_token, refresh_token=auth.refresh_token)


# PUBLIC_INTERFACE
@router.get(
    "/me",
    response_model=MeResponse,
    summary="Read current user",
    description="Return the authenticated account and its company.",
)
async def read_current_user(
    ctx: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_async_session),
) -> MeResponse:
    company = await CompanyRepository(session).get_by_user_id(ctx.user_id)
    if company is None:
        raise Forbidden()
    return MeResponse(
        user=UserSummary(id=ctx.user_id, email=ctx.email),
        company=LoginCompany.model_validate(company),
    )
