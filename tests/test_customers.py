from tests.conftest import API, create_customer, create_order, create_product, register


def test_customer_crud(client, auth) -> None:
    customer = create_customer(client, auth)
    assert customer["country"] == "France"
    assert customer["notes"] == ""

    resp = client.put(f"{API}/customers/{customer['id']}", json={"phone": "+33 1 23 45 67 89"}, headers=auth)
    assert resp.status_code == 200
    assert resp.json()["phone"] == "+33 1 23 45 67 89"
    assert resp.json()["name"] == "Marie Dupont"

    resp = client.delete(f"{API}/customers/{customer['id']}", headers=auth)
    assert resp.status_code == 204
    assert client.get(f"{API}/customers/{customer['id']}", headers=auth).status_code == 404


def test_search_matches_name_or_email_case_insensitively(client, auth) -> None:
    create_customer(client, auth, name="Marie Dupont", email="marie@example.com")
    create_customer(client, auth, name="Café du Coin", email="hello@cafe.example.com")

    by_name = client.get(f"{API}/customers", params={"search": "DUPONT"}, headers=auth).json()
    assert [c["name"] for c in by_name["data"]] == ["Marie Dupont"]

    by_email = client.get(f"{API}/customers", params={"search": "cafe.example"}, headers=auth).json()
    assert [c["name"] for c in by_email["data"]] == ["Café du Coin"]


def test_customer_detail_lists_orders(client, auth) -> None:
    customer = create_customer(client, auth)
    product = create_product(client, auth)
    order = create_order(client, auth, customer["id"], product["id"])

    resp = client.get(f"{API}/customers/{customer['id']}", headers=auth)
    assert resp.status_code == 200
    orders = resp.json()["orders"]
    assert [o["order_number"] for o in orders] == [order["order_number"]]


def test_customer_with_orders_cannot_be_deleted(client, auth) -> None:
    customer = create_customer(client, auth)
    product = create_product(client, auth)
    create_order(client, auth, customer["id"], product["id"])

    resp = client.delete(f"{API}/customers/{customer['id']}", headers=auth)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Cannot delete customer with associated orders"}
    assert client.get(f"{API}/customers/{customer['id']}", headers=auth).status_code == 200


def test_invalid_email_is_rejected(client, auth) -> None:
    resp = client.post(f"{API}/customers", json={"name": "X", "email": "not-an-email"}, headers=auth)
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid data: email:")


def test_customers_are_isolated_per_company(client, auth) -> None:
    customer = create_customer(client, auth)
    other = register(client, email="rival@example.com", company_name="Rival")
    assert client.get(f"{API}/customers/{customer['id']}", headers=other).status_code == 404
    assert client.delete(f"{API}/customers/{customer['id']}", headers=other).status_code == 404
