from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlsplit

from fastapi.testclient import TestClient

from catalog.api.dependencies import get_product_repository
from catalog.main import app

PRODUCTS_URL = "/api/v1/products"


def _create(client: TestClient, name: str = "Widget", price: float = 19.99, **extra) -> dict:
    response = client.post(PRODUCTS_URL, json={"name": name, "price": price, **extra})
    assert response.status_code == 201
    return response.json()["data"]


def test_create_returns_201_with_new_product(client: TestClient) -> None:
    response = client.post(
        PRODUCTS_URL,
        json={"name": "Widget", "price": 19.99, "description": "A widget", "stock": 4},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert "meta" not in body
    product = body["data"]
    assert product["id"]
    assert product["name"] == "Widget"
    assert product["price"] == "19.99"
    assert product["description"] == "A widget"
    assert product["stock"] == 4
    assert product["created_at"]


def test_list_after_create_is_not_stale(client: TestClient) -> None:
    empty = client.get(PRODUCTS_URL).json()
    assert empty["meta"]["total"] == 0

    created = _create(client, "Widget")

    listed = client.get(PRODUCTS_URL).json()
    assert listed["meta"]["total"] == 1
    assert listed["data"][0]["id"] == created["id"]


def test_list_twice_returns_identical_envelopes(client: TestClient) -> None:
    _create(client, "Widget")
    _create(client, "Gadget")

    first = client.get(PRODUCTS_URL, params={"page": 1, "per_page": 10})
    second = client.get(PRODUCTS_URL, params={"page": 1, "per_page": 10})

    assert first.status_code == 200
    assert first.content == second.content


def test_pagination_meta_and_links(client: TestClient) -> None:
    for i in range(25):
        _create(client, f"Item {i:02d}")

    response = client.get(PRODUCTS_URL, params={"per_page": 10})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["data"]) == 10
    assert body["data"][0]["name"] == "Item 24"
    assert body["meta"]["current_page"] == 1
    assert body["meta"]["last_page"] == 3
    assert body["meta"]["total"] == 25
    assert body["meta"]["from"] == 1
    assert body["meta"]["to"] == 10
    assert body["links"]["prev"] is None
    assert parse_qs(urlsplit(body["links"]["next"]).query)["page"] == ["2"]

    last = client.get(PRODUCTS_URL, params={"per_page": 10, "page": 3}).json()
    assert len(last["data"]) == 5
    assert last["meta"]["from"] == 21
    assert last["meta"]["to"] == 25
    assert last["links"]["next"] is None
    assert parse_qs(urlsplit(last["links"]["prev"]).query)["page"] == ["2"]


def test_per_page_is_capped(client: TestClient) -> None:
    response = client.get(PRODUCTS_URL, params={"per_page": 1000})

    assert response.status_code == 200
    assert response.json()["meta"]["per_page"] == 100


def test_search_filters_by_name(client: TestClient) -> None:
    _create(client, "Blue Widget")
    _create(client, "Red Gadget")

    body = client.get(PRODUCTS_URL, params={"search": "widget"}).json()

    assert body["meta"]["total"] == 1
    assert body["data"][0]["name"] == "Blue Widget"
    assert parse_qs(urlsplit(body["links"]["first"]).query)["search"] == ["widget"]


def test_get_product(client: TestClient) -> None:
    created = _create(client)

    response = client.get(f"{PRODUCTS_URL}/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": created}


def test_get_unknown_product_returns_404_envelope(client: TestClient) -> None:
    response = client.get(f"{PRODUCTS_URL}/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Product not found"}


def test_update_product_partially(client: TestClient) -> None:
    created = _create(client, "Widget", description="Original", stock=2)
    # Cache befüllen
    client.get(f"{PRODUCTS_URL}/{created['id']}")

    response = client.patch(f"{PRODUCTS_URL}/{created['id']}", json={"name": "Gadget"})

    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["name"] == "Gadget"
    assert updated["description"] == "Original"
    assert updated["stock"] == 2

    fetched = client.get(f"{PRODUCTS_URL}/{created['id']}").json()["data"]
    assert fetched["name"] == "Gadget"


def test_put_is_accepted_as_update(client: TestClient) -> None:
    created = _create(client)

    response = client.put(f"{PRODUCTS_URL}/{created['id']}", json={"price": 5})

    assert response.status_code == 200
    assert response.json()["data"]["price"] == "5.00"


def test_update_unknown_product_returns_generic_failure(client: TestClient) -> None:
    response = client.patch(f"{PRODUCTS_URL}/missing", json={"name": "Gadget"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to update product"}


def test_delete_product(client: TestClient) -> None:
    created = _create(client)
    client.get(f"{PRODUCTS_URL}/{created['id']}")

    response = client.delete(f"{PRODUCTS_URL}/{created['id']}")

    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"{PRODUCTS_URL}/{created['id']}").status_code == 404
    assert client.get(PRODUCTS_URL).json()["meta"]["total"] == 0


def test_delete_unknown_product_returns_generic_failure(client: TestClient) -> None:
    response = client.delete(f"{PRODUCTS_URL}/missing")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to delete product"}


def test_validation_error_envelope(client: TestClient) -> None:
    response = client.post(PRODUCTS_URL, json={"price": -1})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "The given data was invalid."
    assert "name" in body["errors"]
    assert "price" in body["errors"]


def test_oversized_stock_is_a_validation_error(client: TestClient) -> None:
    response = client.post(PRODUCTS_URL, json={"name": "Widget", "price": 1, "stock": 2**63})

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert "stock" in response.json()["errors"]

    created = _create(client)
    response = client.patch(f"{PRODUCTS_URL}/{created['id']}", json={"stock": 2**63})
    assert response.status_code == 422
    assert "stock" in response.json()["errors"]


def test_invalid_page_parameter(client: TestClient) -> None:
    response = client.get(PRODUCTS_URL, params={"page": 0})

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert "page" in response.json()["errors"]


def test_huge_page_parameter_is_rejected(client: TestClient) -> None:
    response = client.get(PRODUCTS_URL, params={"page": 10**19})

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert "page" in response.json()["errors"]


def test_unknown_route_returns_envelope(client: TestClient) -> None:
    response = client.get("/api/v1/unknown")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_persistence_failure_does_not_leak_details(client: TestClient) -> None:
    failing_repo = AsyncMock()
    failing_repo.find_page.side_effect = RuntimeError("password=hunter2 connection refused")
    app.dependency_overrides[get_product_repository] = lambda: failing_repo

    response = client.get(PRODUCTS_URL)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to fetch products"}
    assert "hunter2" not in response.text


def test_create_failure_returns_generic_message(client: TestClient) -> None:
    failing_repo = AsyncMock()
    failing_repo.insert.side_effect = RuntimeError("UNIQUE constraint failed")
    app.dependency_overrides[get_product_repository] = lambda: failing_repo

    response = client.post(PRODUCTS_URL, json={"name": "Widget", "price": 1})

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to create product"}
