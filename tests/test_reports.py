from tests.conftest import API, create_customer, create_inventory, create_order, create_product, register


def test_dashboard_aggregates_company_activity(client, auth) -> None:
    customer = create_customer(client, auth)
    product = create_product(client, auth)
    done = create_order(client, auth, customer["id"], product["id"])
    create_order(client, auth, customer["id"], product["id"])
    for status in ("pending", "confirmed", "ready", "completed"):
        client.put(f"{API}/orders/{done['id']}", json={"status": status}, headers=auth)
    low = create_inventory(client, auth, name="Farine", current_stock=10, min_stock_level=5)
    client.post(f"{API}/inventory/{low['id']}/movements", json={"type": "out", "quantity": 8}, headers=auth)
    create_inventory(client, auth, name="Sucre", current_stock=50, min_stock_level=5)

    # Another company's data never shows up.
    other = register(client, email="rival@example.com", company_name="Rival")
    rival_customer = create_customer(client, other)
    create_order(client, other, rival_customer["id"], create_product(client, other)["id"])

    resp = client.get(f"{API}/reports/dashboard", params={"period": "week"}, headers=auth)
    assert resp.status_code == 200
    body = resp.json()
    assert body["period"] == "week"
    assert body["orders_summary"] == {"total": 2, "by_status": {"completed": 1, "draft": 1}}
    assert body["sales_summary"]["total_revenue"] == 20.0
    assert body["sales_summary"]["average_order_value"] == 20.0
    assert body["sales_summary"]["growth_rate"] == 0.0
    assert [a["name"] for a in body["low_stock_alerts"]] == ["Farine"]
    kinds = [a["type"] for a in body["recent_activities"]]
    assert kinds.count("order") == 2
    assert kinds.count("stock_movement") == 1


def test_dashboard_defaults_to_month(client, auth) -> None:
    resp = client.get(f"{API}/reports/dashboard", headers=auth)
    assert resp.status_code == 200
    assert resp.json()["period"] == "month"
    assert resp.json()["orders_summary"]["total"] == 0


def test_unknown_period_is_rejected(client, auth) -> None:
    resp = client.get(f"{API}/reports/dashboard", params={"period": "decade"}, headers=auth)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid period: decade"


def test_dashboard_lists_every_low_stock_item(client, auth) -> None:
    for i in range(12):
        create_inventory(client, auth, name=f"Item {i:02d}", current_stock=1, min_stock_level=5)
    create_inventory(client, auth, name="Plenty", current_stock=20, min_stock_level=5)
    create_inventory(client, auth, name="Retired", current_stock=0, min_stock_level=5, is_active=False)

    body = client.get(f"{API}/reports/dashboard", headers=auth).json()
    names = {a["name"] for a in body["low_stock_alerts"]}
    assert len(names) == 12
    assert "Plenty" not in names and "Retired" not in names


def test_order_activity_names_the_customer(client, auth) -> None:
    customer = create_customer(client, auth, name="Jeanne Martin")
    order = create_order(client, auth, customer["id"], create_product(client, auth)["id"])

    body = client.get(f"{API}/reports/dashboard", headers=auth).json()
    descriptions = [a["description"] for a in body["recent_activities"] if a["type"] == "order"]
    assert descriptions == [f"Order {order['order_number']} (Jeanne Martin) - draft"]
