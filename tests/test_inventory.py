from sqlalchemy import func, select

from orderflow.db.models.inventory import StockMovement
from tests.conftest import API, create_customer, create_inventory, create_order, create_product, register


def _move(client, headers, inventory_id, **payload):
    return client.post(f"{API}/inventory/{inventory_id}/movements", json=payload, headers=headers)


def _stock(client, headers, inventory_id) -> float:
    return client.get(f"{API}/inventory/{inventory_id}", headers=headers).json()["current_stock"]


def test_in_out_and_adjustment_movements(client, auth) -> None:
    row = create_inventory(client, auth, current_stock=10)

    resp = _move(client, auth, row["id"], type="out", quantity=3, reason="used")
    assert resp.status_code == 201
    assert resp.json()["unit_cost"] == 1.5
    assert _stock(client, auth, row["id"]) == 7

    assert _move(client, auth, row["id"], type="in", quantity=5, unit_cost=1.2).json()["unit_cost"] == 1.2
    assert _stock(client, auth, row["id"]) == 12

    assert _move(client, auth, row["id"], type="adjustment", quantity=4).status_code == 201
    assert _stock(client, auth, row["id"]) == 4


def test_out_above_stock_is_rejected_without_writes(client, auth, sync_engine) -> None:
    row = create_inventory(client, auth, current_stock=2)

    resp = _move(client, auth, row["id"], type="out", quantity=5)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Insufficient stock"
    assert _stock(client, auth, row["id"]) == 2
    with sync_engine.connect() as conn:
        assert conn.execute(select(func.count()).select_from(StockMovement.__table__)).scalar_one() == 0


def test_out_of_exact_stock_reaches_zero(client, auth) -> None:
    row = create_inventory(client, auth, current_stock=3)
    assert _move(client, auth, row["id"], type="out", quantity=3).status_code == 201
    assert _stock(client, auth, row["id"]) == 0


def test_negative_quantity_is_rejected(client, auth) -> None:
    row = create_inventory(client, auth)
    resp = _move(client, auth, row["id"], type="in", quantity=-1)
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid data: quantity:")


def test_movement_history_includes_order(client, auth) -> None:
    customer = create_customer(client, auth)
    product = create_product(client, auth)
    order = create_order(client, auth, customer["id"], product["id"])
    row = create_inventory(client, auth, product_id=product["id"], type="finished_product", current_stock=8)
    assert row["product"]["id"] == product["id"]

    resp = _move(client, auth, row["id"], type="out", quantity=2, order_id=order["id"], reference="sale")
    assert resp.status_code == 201
    assert resp.json()["order"] == {"id": order["id"], "order_number": order["order_number"]}
    _move(client, auth, row["id"], type="in", quantity=1)

    history = client.get(f"{API}/inventory/{row['id']}/movements", headers=auth).json()
    assert history["pagination"]["total"] == 2
    assert {m["type"] for m in history["data"]} == {"in", "out"}


def test_movement_with_foreign_order_is_not_found(client, auth) -> None:
    other = register(client, email="rival@example.com", company_name="Rival")
    customer = create_customer(client, other)
    product = create_product(client, other)
    foreign_order = create_order(client, other, customer["id"], product["id"])
    row = create_inventory(client, auth, current_stock=5)

    resp = _move(client, auth, row["id"], type="out", quantity=1, order_id=foreign_order["id"])
    assert resp.status_code == 404
    assert _stock(client, auth, row["id"]) == 5


def test_update_cannot_change_stock(client, auth) -> None:
    row = create_inventory(client, auth, current_stock=10)
    resp = client.put(
        f"{API}/inventory/{row['id']}",
        json={"current_stock": 999, "location": "Shelf B", "min_stock_level": 2},
        headers=auth,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["current_stock"] == 10
    assert body["location"] == "Shelf B"
    assert body["min_stock_level"] == 2


def test_list_filters(client, auth) -> None:
    create_inventory(client, auth, name="Farine", current_stock=2, min_stock_level=10)
    create_inventory(client, auth, name="Sucre", current_stock=50, min_stock_level=10)
    create_inventory(client, auth, name="Boîte", type="finished_product", current_stock=1, min_stock_level=0, is_active=False)

    low = client.get(f"{API}/inventory", params={"low_stock": "true"}, headers=auth).json()
    assert [r["name"] for r in low["data"]] == ["Farine"]

    finished = client.get(f"{API}/inventory", params={"type": "finished_product"}, headers=auth).json()
    assert [r["name"] for r in finished["data"]] == ["Boîte"]

    active = client.get(f"{API}/inventory", params={"is_active": "true"}, headers=auth).json()
    assert active["pagination"]["total"] == 2


def test_inventory_is_isolated_per_company(client, auth) -> None:
    row = create_inventory(client, auth)
    other = register(client, email="rival@example.com", company_name="Rival")

    assert client.get(f"{API}/inventory/{row['id']}", headers=other).status_code == 404
    assert _move(client, other, row["id"], type="out", quantity=1).status_code == 404
    assert client.get(f"{API}/inventory/{row['id']}/movements", headers=other).status_code == 404
    assert _stock(client, auth, row["id"]) == 10


def test_foreign_product_link_is_rejected(client, auth) -> None:
    other = register(client, email="rival@example.com", company_name="Rival")
    foreign_product = create_product(client, other)
    resp = client.post(
        f"{API}/inventory",
        json={"name": "X", "type": "finished_product", "product_id": foreign_product["id"]},
        headers=auth,
    )
    assert resp.status_code == 404
