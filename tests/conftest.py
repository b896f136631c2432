from typing import Dict, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from orderflow.api.main import create_app
from orderflow.core.settings import AppSettings
from orderflow.db import Base, Settings

API = "/api/v1"


@pytest.fixture
def db_path(tmp_path) -> str:
    path = tmp_path / "orderflow.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(bind=engine)
    engine.dispose()
    return str(path)


@pytest.fixture
def sync_engine(db_path) -> Iterator[Engine]:
    """Direct access to the test database for assertions on stored rows."""
    engine = create_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()


@pytest.fixture
def app(db_path):
    settings = AppSettings(RUN_MIGRATIONS_ON_STARTUP=False, AUTO_SEED=False, LOG_LEVEL="WARNING")
    return create_app(settings, db_settings=Settings(POSTGRES_URL=f"sqlite+aiosqlite:///{db_path}"))


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


def register(
    client: TestClient,
    email: str = "owner@example.com",
    password: str = "secret123",
    company_name: str = "Atelier Lumière",
) -> Dict[str, str]:
    """Sign up, log in and return the Authorization header."""
    resp = client.post(
        f"{API}/auth/signup",
        json={"email": email, "password": password, "company_name": company_name},
    )
    assert resp.status_code == 201, resp.text
    resp = client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def auth(client) -> Dict[str, str]:
    return register(client)


def create_product(client: TestClient, headers: Dict[str, str], **overrides) -> dict:
    payload = {"name": "Tarte aux pommes", "price": 10.0, "sku": "TART-001", "category": "tarts"}
    payload.update(overrides)
    resp = client.post(f"{API}/products", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_customer(client: TestClient, headers: Dict[str, str], **overrides) -> dict:
    payload = {"name": "Marie Dupont", "email": "marie@example.com", "city": "Paris"}
    payload.update(overrides)
    resp = client.post(f"{API}/customers", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_order(client: TestClient, headers: Dict[str, str], customer_id: str, product_id: str, **overrides) -> dict:
    payload = {
        "customer_id": customer_id,
        "items": [{"product_id": product_id, "quantity": 2, "unit_price": 10.0}],
    }
    payload.update(overrides)
    resp = client.post(f"{API}/orders", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_inventory(client: TestClient, headers: Dict[str, str], **overrides) -> dict:
    payload = {
        "name": "Farine T55",
        "type": "raw_material",
        "unit": "kg",
        "current_stock": 10,
        "min_stock_level": 5,
        "cost_per_unit": 1.5,
    }
    payload.update(overrides)
    resp = client.post(f"{API}/inventory", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
