from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from catalog.domain.models import Product, ProductCreate


class AbstractProductRepository(ABC):
    @abstractmethod
    async def find_page(
        self, search: str | None, page: int, per_page: int
    ) -> tuple[list[Product], int]:
        """
        Returns one page of products ordered by created_at descending,
        optionally filtered by a case-insensitive substring match on name,
        together with the total number of matching products.
        """
        ...

    @abstractmethod
    async def find_by_id(self, product_id: str) -> Product | None:
        """Finds a product by ID."""
        ...

    @abstractmethod
    async def insert(self, payload: ProductCreate) -> Product:
        """Persists a new product, assigning ID and timestamps."""
        ...

    @abstractmethod
    async def update_by_id(self, product_id: str, changes: dict[str, Any]) -> Product | None:
        """Applies the given field changes. Returns None if the product does not exist."""
        ...

    @abstractmethod
    async def delete_by_id(self, product_id: str) -> bool:
        """Hard-deletes a product by ID. Returns True if deleted."""
        ...

    async def initialize(self) -> None:
        """Prepares the backing store. Default: nothing to do."""
        return None

    async def close(self) -> None:
        """Releases connections. Default: nothing to do."""
        return None
