from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from catalog.adapters.memory_cache import InMemoryCacheStore
from catalog.domain.models import ProductCreate
from catalog.main import app
from catalog.repositories.product_repository import InMemoryProductRepository
from catalog.services.product_service import ProductService


def _sample(name: str) -> float:
    return REGISTRY.get_sample_value(name) or 0.0


def test_request_count_middleware() -> None:
    client = TestClient(app)

    # Get initial value (if any)
    def get_count(method: str, path: str, status_code: str) -> float:
        return (
            REGISTRY.get_sample_value(
                "http_requests_total", {"method": method, "path": path, "status_code": status_code}
            )
            or 0.0
        )

    initial = get_count("GET", "/healthz", "200")

    # Make a request
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["success"] is True

    final = get_count("GET", "/healthz", "200")
    assert final == initial + 1


def test_metrics_endpoint() -> None:
    client = TestClient(app)
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text


@pytest.mark.asyncio  # type: ignore[misc]
async def test_cache_metrics() -> None:
    service = ProductService(repository=InMemoryProductRepository(), cache=InMemoryCacheStore())
    await service.create_product(ProductCreate(name="Widget", price=Decimal("1.00")))

    initial_hits = _sample("cache_hits_total")
    initial_misses = _sample("cache_misses_total")

    # Miss
    await service.list_products()
    assert _sample("cache_misses_total") == initial_misses + 1
    assert _sample("cache_hits_total") == initial_hits

    # Hit
    await service.list_products()
    assert _sample("cache_hits_total") == initial_hits + 1
    assert _sample("cache_misses_total") == initial_misses + 1


@pytest.mark.asyncio  # type: ignore[misc]
async def test_flush_and_error_metrics() -> None:
    service = ProductService(repository=InMemoryProductRepository(), cache=InMemoryCacheStore())

    initial_flushes = _sample("cache_flushes_total")
    initial_errors = (
        REGISTRY.get_sample_value("product_operation_errors_total", {"operation": "get"}) or 0.0
    )

    await service.create_product(ProductCreate(name="Widget", price=Decimal("1.00")))
    with pytest.raises(Exception):
        await service.get_product("missing")

    assert _sample("cache_flushes_total") == initial_flushes + 1
    assert (
        REGISTRY.get_sample_value("product_operation_errors_total", {"operation": "get"})
        == initial_errors + 1
    )
