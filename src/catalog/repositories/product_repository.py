# src/catalog/repositories/product_repository.py
from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from catalog.domain.models import Product, ProductCreate
from catalog.repositories.base import AbstractProductRepository


def utc_now() -> datetime:
    return datetime.now(UTC)


class InMemoryProductRepository(AbstractProductRepository):
    """
    In-Memory Repository für Tests und den Einsatz ohne Datenbank.
    Interface kann gegen die SQLAlchemy-Implementierung ausgetauscht werden.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        # Einfügereihenfolge bleibt erhalten (dict), dient als Tie-Breaker beim Sortieren
        self._products: dict[str, Product] = {}
        self._clock = clock

    async def find_page(
        self, search: str | None, page: int, per_page: int
    ) -> tuple[list[Product], int]:
        products = list(self._products.values())
        if search is not None:
            needle = search.lower()
            products = [p for p in products if needle in p.name.lower()]

        # Stabil sortiert: bei gleichem created_at gewinnt der zuletzt eingefügte Datensatz
        ordered = sorted(reversed(products), key=lambda p: p.created_at, reverse=True)
        start = (page - 1) * per_page
        return ordered[start : start + per_page], len(ordered)

    async def find_by_id(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    async def insert(self, payload: ProductCreate) -> Product:
        now = self._clock()
        product = Product(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            **payload.model_dump(),
        )
        self._products[product.id] = product
        return product

    async def update_by_id(self, product_id: str, changes: dict[str, Any]) -> Product | None:
        product = self._products.get(product_id)
        if product is None:
            return None
        updated = product.model_copy(update={**changes, "updated_at": self._clock()})
        self._products[product_id] = updated
        return updated

    async def delete_by_id(self, product_id: str) -> bool:
        return self._products.pop(product_id, None) is not None
