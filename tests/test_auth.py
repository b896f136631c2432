from uuid import uuid4

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from jose import JWTError, jwt
from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.api.main import create_app
from orderflow.core.deps import get_identity_provider
from orderflow.core.security import decode_token, get_password_hash
from orderflow.core.settings import AppSettings
from orderflow.db import Settings
from orderflow.db.models.company import Company
from orderflow.db.session import get_async_session
from orderflow.repositories.company import CompanyRepository
from orderflow.services.identity import Identity, IdentityProvider, LocalIdentityProvider
from tests.conftest import API, register


def test_signup_returns_user_and_company(client) -> None:
    resp = client.post(
        f"{API}/auth/signup",
        json={
            "email": "baker@example.com",
            "password": "secret123",
            "company_name": "Boulangerie",
            "business_type": "wholesale",
        },
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["email"] == "baker@example.com"
    assert body["company"]["name"] == "Boulangerie"
    assert body["company"]["business_type"] == "wholesale"


def test_signup_duplicate_email_is_conflict_without_second_company(client, sync_engine) -> None:
    register(client, email="dup@example.com")
    resp = client.post(
        f"{API}/auth/signup",
        json={"email": "dup@example.com", "password": "secret123", "company_name": "Other"},
    )
    assert resp.status_code == 409
    assert "error" in resp.json()
    with sync_engine.connect() as conn:
        assert conn.execute(select(func.count()).select_from(Company.__table__)).scalar_one() == 1


def test_signup_rejects_short_password(client) -> None:
    resp = client.post(
        f"{API}/auth/signup",
        json={"email": "a@example.com", "password": "123", "company_name": "X"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid data: password:")


def test_login_returns_tokens_user_and_company(client) -> None:
    register(client, email="login@example.com", company_name="Pâtisserie")
    resp = client.post(f"{API}/auth/login", json={"email": "login@example.com", "password": "secret123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"] and body["refresh_token"]
    assert body["user"]["email"] == "login@example.com"
    assert body["company"]["name"] == "Pâtisserie"
    assert body["company"]["inventory_management"] is False


def test_login_wrong_password_is_unauthorized(client) -> None:
    register(client, email="wrong@example.com")
    resp = client.post(f"{API}/auth/login", json={"email": "wrong@example.com", "password": "nope-nope"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


def test_missing_token_is_unauthorized(client) -> None:
    resp = client.get(f"{API}/products")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Missing or invalid authentication token"}


def test_malformed_token_is_unauthorized(client) -> None:
    resp = client.get(f"{API}/products", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_identity_without_company_is_forbidden(app, client) -> None:
    class NoCompanyProvider(IdentityProvider):
        async def get_identity(self, access_token: str):
            return Identity(id=uuid4(), email="ghost@example.com")

    app.dependency_overrides[get_identity_provider] = lambda: NoCompanyProvider()
    try:
        resp = client.get(f"{API}/products", headers={"Authorization": "Bearer anything"})
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 403
    assert resp.json() == {"error": "Company not found"}


def test_refresh_issues_new_pair_and_rejects_access_tokens(client) -> None:
    register(client, email="refresh@example.com")
    tokens = client.post(
        f"{API}/auth/login", json={"email": "refresh@example.com", "password": "secret123"}
    ).json()

    resp = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert resp.status_code == 200
    assert resp.json()["access_token"]

    resp = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert resp.status_code == 401


def test_refresh_token_is_not_an_access_token(client) -> None:
    register(client, email="kind@example.com")
    tokens = client.post(
        f"{API}/auth/login", json={"email": "kind@example.com", "password": "secret123"}
    ).json()
    resp = client.get(f"{API}/products", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
    assert resp.status_code == 401


def test_me_returns_caller_and_company(client, auth) -> None:
    resp = client.get(f"{API}/auth/me", headers=auth)
    assert resp.status_code == 200
    body = resp.json()
    assert body["user"]["email"] == "owner@example.com"
    assert body["company"]["name"] == "Atelier Lumière"


def test_password_is_stored_hashed(client, sync_engine) -> None:
    register(client, email="hash@example.com", password="plaintext1")
    with sync_engine.connect() as conn:
        stored = conn.execute(text("SELECT hashed_password FROM app_users")).scalar_one()
    assert stored != "plaintext1"
    assert stored.startswith("$2")


def test_tokens_are_signed_with_the_app_settings(db_path) -> None:
    settings = AppSettings(
        RUN_MIGRATIONS_ON_STARTUP=False,
        AUTO_SEED=False,
        LOG_LEVEL="WARNING",
        JWT_SECRET_KEY="injected-secret",
    )
    app = create_app(settings, db_settings=Settings(POSTGRES_URL=f"sqlite+aiosqlite:///{db_path}"))
    with TestClient(app) as client:
        headers = register(client, email="secret@example.com")
        token = headers["Authorization"].split(" ", 1)[1]

        claims = jwt.decode(token, "injected-secret", algorithms=["HS256"])
        assert claims["email"] == "secret@example.com"
        with pytest.raises(JWTError):
            decode_token(token)

        assert client.get(f"{API}/auth/me", headers=headers).status_code == 200


class _NoPrecheckProvider(LocalIdentityProvider):
    """Skips the email lookup, as when two signups race for the same address."""

    async def create_user(self, email: str, password: str) -> Identity:
        user = await self.repo.create_user(email=email, hashed_password=get_password_hash(password))
        return Identity(id=user.id, email=user.email)


def test_signup_unique_email_violation_is_conflict(app, client, sync_engine) -> None:
    register(client, email="race@example.com")

    def provider(session: AsyncSession = Depends(get_async_session)) -> IdentityProvider:
        return _NoPrecheckProvider(session, settings=app.state.settings)

    app.dependency_overrides[get_identity_provider] = provider
    try:
        resp = client.post(
            f"{API}/auth/signup",
            json={"email": "race@example.com", "password": "secret123", "company_name": "Other"},
        )
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 409
    assert resp.json() == {"error": "User already registered"}
    with sync_engine.connect() as conn:
        assert conn.execute(select(func.count()).select_from(Company.__table__)).scalar_one() == 1


def test_signup_other_constraint_violation_is_bad_request(client, sync_engine, monkeypatch) -> None:
    async def failing_create_company(self, *, user_id, values):
        raise IntegrityError(
            "INSERT INTO companies", {}, Exception("CHECK constraint failed: ck_companies_currency")
        )

    monkeypatch.setattr(CompanyRepository, "create_company", failing_create_company)
    resp = client.post(
        f"{API}/auth/signup",
        json={"email": "check@example.com", "password": "secret123", "company_name": "Broken"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Database constraint violation"
    with sync_engine.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM app_users")).scalar_one() == 0
