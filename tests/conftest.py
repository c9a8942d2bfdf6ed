# tests/conftest.py
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import catalog.api.dependencies as _deps
from catalog.core.config import Settings, get_settings
from catalog.domain.models import Product
from catalog.main import app, limiter


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        cache_backend="memory",
        cache_ttl_seconds=3600,
    )


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    # Singletons zurücksetzen, damit jeder Test mit leerer In-Memory-Datenbank
    # und leerem Cache startet.
    _deps._repository = None
    _deps._cache_store = None
    limiter.reset()
    app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        _deps._repository = None
        _deps._cache_store = None


class StepClock:
    """Liefert bei jedem Aufruf einen um eine Sekunde späteren Zeitpunkt."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 5, 20, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


def make_product(index: int = 1, name: str | None = None) -> Product:
    created = datetime(2024, 5, 20, 12, 0, tzinfo=UTC) + timedelta(minutes=index)
    return Product(
        id=f"prod-{index}",
        name=name or f"Product {index}",
        description=None,
        price=Decimal("9.99"),
        stock=index,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def product_factory():
    return make_product
