from tests.conftest import API, create_product, register


def test_product_crud(client, auth) -> None:
    product = create_product(client, auth, attributes={"flavour": "apple"})
    assert product["unit"] == "piece"
    assert product["attributes"] == {"flavour": "apple"}
    assert product["is_active"] is True

    resp = client.get(f"{API}/products/{product['id']}", headers=auth)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Tarte aux pommes"

    resp = client.put(f"{API}/products/{product['id']}", json={"price": 12.5}, headers=auth)
    assert resp.status_code == 200
    assert resp.json()["price"] == 12.5
    assert resp.json()["sku"] == "TART-001"

    resp = client.delete(f"{API}/products/{product['id']}", headers=auth)
    assert resp.status_code == 204
    assert client.get(f"{API}/products/{product['id']}", headers=auth).status_code == 404


def test_delete_missing_product_is_not_found(client, auth) -> None:
    resp = client.delete(f"{API}/products/00000000-0000-0000-0000-000000000000", headers=auth)
    assert resp.status_code == 404


def test_list_filters_and_search(client, auth) -> None:
    create_product(client, auth, name="Tarte aux pommes", sku="TART-001", category="tarts")
    create_product(client, auth, name="Éclair", sku="ECL-1", category="pastry", track_inventory=True)
    create_product(client, auth, name="Old cake", sku="OLD-1", category="cakes", is_active=False)

    by_category = client.get(f"{API}/products", params={"category": "pastry"}, headers=auth).json()
    assert [p["name"] for p in by_category["data"]] == ["Éclair"]

    inactive = client.get(f"{API}/products", params={"is_active": "false"}, headers=auth).json()
    assert [p["name"] for p in inactive["data"]] == ["Old cake"]

    tracked = client.get(f"{API}/products", params={"track_inventory": "true"}, headers=auth).json()
    assert [p["sku"] for p in tracked["data"]] == ["ECL-1"]

    by_sku = client.get(f"{API}/products", params={"search": "tart"}, headers=auth).json()
    assert by_sku["pagination"]["total"] == 1
    assert by_sku["data"][0]["sku"] == "TART-001"


def test_products_are_isolated_per_company(client, auth) -> None:
    product = create_product(client, auth)
    other = register(client, email="rival@example.com", company_name="Rival")

    assert client.get(f"{API}/products/{product['id']}", headers=other).status_code == 404
    assert client.put(f"{API}/products/{product['id']}", json={"price": 1}, headers=other).status_code == 404
    assert client.delete(f"{API}/products/{product['id']}", headers=other).status_code == 404
    assert client.get(f"{API}/products", headers=other).json()["pagination"]["total"] == 0


def test_negative_price_is_rejected(client, auth) -> None:
    resp = client.post(f"{API}/products", json={"name": "Bad", "price": -1}, headers=auth)
    assert resp.status_code == 400
    assert "price" in resp.json()["error"]
