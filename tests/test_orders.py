import re

import pytest
from sqlalchemy import func, select

from orderflow.db.models.sales import Order, OrderItem
from tests.conftest import API, create_customer, create_order, create_product, register


@pytest.fixture
def catalog(client, auth):
    customer = create_customer(client, auth)
    cake = create_product(client, auth, name="Gâteau", sku="CAKE-1", price=10.0)
    tart = create_product(client, auth, name="Tarte", sku="TART-1", price=5.5)
    return customer, cake, tart


def test_create_order_computes_lines_and_totals(client, auth, catalog) -> None:
    customer, cake, tart = catalog
    resp = client.post(
        f"{API}/orders",
        json={
            "customer_id": customer["id"],
            "discount": 2.5,
            "tax_rate": 20,
            "delivery_method": "delivery",
            "items": [
                {"product_id": cake["id"], "quantity": 2, "unit_price": 10.0, "discount": 1.0},
                {"product_id": tart["id"], "quantity": 1, "unit_price": 5.5, "customizations": {"message": "Joyeux"}},
            ],
        },
        headers=auth,
    )
    assert resp.status_code == 201, resp.text
    order = resp.json()

    assert re.fullmatch(r"ORD-\d{8}-[0-9A-F]{8}", order["order_number"])
    assert order["status"] == "draft"
    assert order["customer"]["name"] == "Marie Dupont"
    assert sorted(item["line_total"] for item in order["items"]) == [5.5, 19.0]
    assert {item["product"]["name"] for item in order["items"]} == {"Gâteau", "Tarte"}
    assert order["subtotal"] == 24.5
    assert order["tax_amount"] == 4.4
    assert order["total"] == 26.4


def test_order_numbers_are_unique(client, auth, catalog) -> None:
    customer, cake, _ = catalog
    numbers = {create_order(client, auth, customer["id"], cake["id"])["order_number"] for _ in range(5)}
    assert len(numbers) == 5


def test_order_requires_items(client, auth, catalog) -> None:
    customer, _, _ = catalog
    resp = client.post(f"{API}/orders", json={"customer_id": customer["id"], "items": []}, headers=auth)
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid data: items:")


def test_order_for_foreign_customer_is_not_found(client, auth, catalog) -> None:
    _, cake, _ = catalog
    other = register(client, email="rival@example.com", company_name="Rival")
    foreign_customer = create_customer(client, other)
    resp = client.post(
        f"{API}/orders",
        json={"customer_id": foreign_customer["id"], "items": [{"product_id": cake["id"], "quantity": 1, "unit_price": 1}]},
        headers=auth,
    )
    assert resp.status_code == 404


def test_foreign_product_rolls_back_the_whole_order(client, auth, catalog, sync_engine) -> None:
    customer, cake, _ = catalog
    other = register(client, email="rival@example.com", company_name="Rival")
    foreign_product = create_product(client, other, name="Not yours")

    resp = client.post(
        f"{API}/orders",
        json={
            "customer_id": customer["id"],
            "items": [
                {"product_id": cake["id"], "quantity": 1, "unit_price": 10},
                {"product_id": foreign_product["id"], "quantity": 1, "unit_price": 10},
            ],
        },
        headers=auth,
    )
    assert resp.status_code == 404
    assert resp.json()["error"] == "Product not found"
    with sync_engine.connect() as conn:
        assert conn.execute(select(func.count()).select_from(Order.__table__)).scalar_one() == 0
        assert conn.execute(select(func.count()).select_from(OrderItem.__table__)).scalar_one() == 0


def test_list_orders_filters(client, auth, catalog) -> None:
    customer, cake, _ = catalog
    second = create_customer(client, auth, name="Paul", email="paul@example.com")
    first_order = create_order(client, auth, customer["id"], cake["id"], order_date="2026-01-10")
    create_order(client, auth, second["id"], cake["id"], order_date="2026-03-01")
    client.put(f"{API}/orders/{first_order['id']}", json={"status": "pending"}, headers=auth)

    listed = client.get(f"{API}/orders", headers=auth).json()
    assert listed["pagination"]["total"] == 2
    assert all(o["customer"] is not None for o in listed["data"])

    pending = client.get(f"{API}/orders", params={"status": "pending"}, headers=auth).json()
    assert [o["id"] for o in pending["data"]] == [first_order["id"]]

    by_customer = client.get(f"{API}/orders", params={"customer_id": second["id"]}, headers=auth).json()
    assert [o["customer"]["name"] for o in by_customer["data"]] == ["Paul"]

    in_range = client.get(
        f"{API}/orders", params={"date_from": "2026-02-01", "date_to": "2026-03-31"}, headers=auth
    ).json()
    assert [o["order_date"] for o in in_range["data"]] == ["2026-03-01"]


def test_update_recomputes_totals(client, auth, catalog) -> None:
    customer, cake, _ = catalog
    order = create_order(client, auth, customer["id"], cake["id"])
    assert order["total"] == 20.0

    resp = client.put(f"{API}/orders/{order['id']}", json={"discount": 5, "tax_rate": 10}, headers=auth)
    assert resp.status_code == 200
    body = resp.json()
    assert body["subtotal"] == 20.0
    assert body["tax_amount"] == 1.5
    assert body["total"] == 16.5
    assert len(body["items"]) == 1


def test_status_lifecycle(client, auth, catalog) -> None:
    customer, cake, _ = catalog
    order = create_order(client, auth, customer["id"], cake["id"])
    url = f"{API}/orders/{order['id']}"

    resp = client.put(url, json={"status": "completed"}, headers=auth)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid status transition from draft to completed"}

    for status in ("pending", "confirmed", "in_production", "ready", "delivered", "completed"):
        resp = client.put(url, json={"status": status}, headers=auth)
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == status

    resp = client.put(url, json={"status": "cancelled"}, headers=auth)
    assert resp.status_code == 400


def test_same_status_is_a_no_op(client, auth, catalog) -> None:
    customer, cake, _ = catalog
    order = create_order(client, auth, customer["id"], cake["id"])
    resp = client.put(f"{API}/orders/{order['id']}", json={"status": "draft", "notes": "call first"}, headers=auth)
    assert resp.status_code == 200
    assert resp.json()["status"] == "draft"
    assert resp.json()["notes"] == "call first"


def test_changing_customer_checks_ownership(client, auth, catalog) -> None:
    customer, cake, _ = catalog
    order = create_order(client, auth, customer["id"], cake["id"])
    other = register(client, email="rival@example.com", company_name="Rival")
    foreign_customer = create_customer(client, other)

    resp = client.put(f"{API}/orders/{order['id']}", json={"customer_id": foreign_customer["id"]}, headers=auth)
    assert resp.status_code == 404


def test_delete_order_removes_items(client, auth, catalog, sync_engine) -> None:
    customer, cake, _ = catalog
    order = create_order(client, auth, customer["id"], cake["id"])

    assert client.delete(f"{API}/orders/{order['id']}", headers=auth).status_code == 204
    assert client.get(f"{API}/orders/{order['id']}", headers=auth).status_code == 404
    with sync_engine.connect() as conn:
        assert conn.execute(select(func.count()).select_from(OrderItem.__table__)).scalar_one() == 0


@pytest.mark.parametrize("final_status", ["completed", "delivered"])
def test_finished_orders_cannot_be_deleted(client, auth, catalog, final_status) -> None:
    customer, cake, _ = catalog
    order = create_order(client, auth, customer["id"], cake["id"])
    url = f"{API}/orders/{order['id']}"
    for status in ("pending", "confirmed", "ready", final_status):
        assert client.put(url, json={"status": status}, headers=auth).status_code == 200

    resp = client.delete(url, headers=auth)
    assert resp.status_code == 400
    assert client.get(url, headers=auth).status_code == 200


def test_orders_are_isolated_per_company(client, auth, catalog) -> None:
    customer, cake, _ = catalog
    order = create_order(client, auth, customer["id"], cake["id"])
    other = register(client, email="rival@example.com", company_name="Rival")

    assert client.get(f"{API}/orders/{order['id']}", headers=other).status_code == 404
    assert client.put(f"{API}/orders/{order['id']}", json={"notes": "x"}, headers=other).status_code == 404
    assert client.delete(f"{API}/orders/{order['id']}", headers=other).status_code == 404
