from __future__ import annotations

from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class SignupRequest(BaseModel):
    """Create an account and its owning company."""
    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=6, description="Account password")
    company_name: str = Field(..., min_length=1, description="Company name")
    company_email: Optional[EmailStr] = Field(None, description="Company contact email")
    company_phone: Optional[str] = Field(None)
    company_address: Optional[str] = Field(None)
    business_type: Literal["custom_orders", "wholesale"] = Field("custom_orders")
    inventory_management: bool = Field(False)
    inventory_type: Literal["finished_products", "raw_materials"] = Field("finished_products")
    currency: str = Field("EUR")
    timezone: str = Field("Europe/Paris")


class LoginRequest(BaseModel):
    """Email/password credentials."""
    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=1, description="Account password")


class RefreshRequest(BaseModel):
    """Request to refresh an access token."""
    refresh_token: str = Field(..., description="Refresh token")


class UserSummary(BaseModel):
    id: UUID
    email: str


class SignupCompany(BaseModel):
    id: UUID
    name: str
    business_type: str

    class Config:
        from_attributes = True


class LoginCompany(SignupCompany):
    inventory_management: bool


class SignupResponse(BaseModel):
    """Response of a successful signup."""
    user: UserSummary
    company: SignupCompany


class TokenPair(BaseModel):
    """Access and refresh tokens."""
    token_type: str = Field("bearer", description="Token type, typically 'bearer'")
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")


class LoginResponse(TokenPair):
    """Tokens plus the caller's identity and company."""
    user: UserSummary
    company: LoginCompany


class MeResponse(BaseModel):
    """Authenticated caller."""
    user: UserSummary
    company: LoginCompany
