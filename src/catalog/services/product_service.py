# src/catalog/services/product_service.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from catalog.core.metrics import (
    CACHE_FLUSHES,
    CACHE_HITS,
    CACHE_MISSES,
    PRODUCT_OPERATION_ERRORS,
)
from catalog.domain.models import Product, ProductCreate, ProductPage, ProductUpdate
from catalog.domain.ports import (
    CacheStorePort,
    CatalogOperation,
    ErrorKind,
    ProductNotFoundError,
    ProductOperationError,
)
from catalog.repositories.base import AbstractProductRepository
from catalog.services.cache_keys import product_key, product_list_key

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProductService:
    """
    Orchestriert Cache und Repository für die fünf CRUD-Operationen.

    Lesen: Read-Through über den Cache mit fester TTL.
    Schreiben: Repository-Aufruf, danach globale Invalidierung des Caches.

    Jede Operation fängt sämtliche Fehler an ihrer Grenze ab, loggt sie mit Kontext
    und wirft stattdessen einen ProductOperationError. Die Übersetzung in Status-Code
    und Meldung passiert einmalig in der API-Schicht.
    """

    def __init__(
        self,
        repository: AbstractProductRepository,
        cache: CacheStorePort,
        cache_ttl_seconds: int = 3600,
        call_timeout_seconds: float = 5.0,
    ) -> None:
        self._repo = repository
        self._cache = cache
        self._ttl = cache_ttl_seconds
        self._timeout = call_timeout_seconds

    async def list_products(
        self, page: int = 1, per_page: int = 10, search: str | None = None
    ) -> ProductPage:
        context = {
            "operation": CatalogOperation.LIST,
            "page": page,
            "per_page": per_page,
            "search": search,
        }
        try:
            key = product_list_key(page, per_page, search)
            cached = await self._call(self._cache.get(key))
            if cached is not None:
                CACHE_HITS.inc()
                return ProductPage.model_validate_json(cached)

            CACHE_MISSES.inc()
            items, total = await self._call(self._repo.find_page(search, page, per_page))
            result = ProductPage(items=items, total=total, page=page, per_page=per_page)
            await self._call(self._cache.set(key, result.model_dump_json(), self._ttl))
            return result
        except Exception as e:
            raise self._fail("Error fetching products", context) from e

    async def get_product(self, product_id: str) -> Product:
        context = {"operation": CatalogOperation.GET, "product_id": product_id}
        try:
            key = product_key(product_id)
            cached = await self._call(self._cache.get(key))
            if cached is not None:
                CACHE_HITS.inc()
                return Product.model_validate_json(cached)

            CACHE_MISSES.inc()
            product = await self._call(self._repo.find_by_id(product_id))
            if product is None:
                raise ProductNotFoundError(product_id)
            await self._call(self._cache.set(key, product.model_dump_json(), self._ttl))
            return product
        except ProductNotFoundError as e:
            raise self._fail("Error fetching product", context, ErrorKind.NOT_FOUND) from e
        except Exception as e:
            raise self._fail("Error fetching product", context) from e

    async def create_product(self, payload: ProductCreate) -> Product:
        context = {"operation": CatalogOperation.CREATE}
        try:
            product = await self._call(self._repo.insert(payload))
            await self._flush_cache()
            return product
        except Exception as e:
            raise self._fail("Error creating product", context) from e

    async def update_product(self, product_id: str, payload: ProductUpdate) -> Product:
        context = {"operation": CatalogOperation.UPDATE, "product_id": product_id}
        try:
            product = await self._call(self._repo.update_by_id(product_id, payload.changes()))
            if product is None:
                raise ProductNotFoundError(product_id)
            await self._flush_cache()
            return product
        except ProductNotFoundError as e:
            raise self._fail("Error updating product", context, ErrorKind.NOT_FOUND) from e
        except Exception as e:
            raise self._fail("Error updating product", context) from e

    async def delete_product(self, product_id: str) -> None:
        context = {"operation": CatalogOperation.DELETE, "product_id": product_id}
        try:
            if not await self._call(self._repo.delete_by_id(product_id)):
                raise ProductNotFoundError(product_id)
            await self._flush_cache()
        except ProductNotFoundError as e:
            raise self._fail("Error deleting product", context, ErrorKind.NOT_FOUND) from e
        except Exception as e:
            raise self._fail("Error deleting product", context) from e

    async def _call(self, awaitable: Awaitable[T]) -> T:
        """Führt einen Collaborator-Aufruf mit Deadline aus."""
        async with asyncio.timeout(self._timeout):
            return await awaitable

    async def _flush_cache(self) -> None:
        await self._call(self._cache.flush_all())
        CACHE_FLUSHES.inc()
        logger.info("Product cache flushed")

    def _fail(
        self,
        message: str,
        context: dict[str, object],
        kind: ErrorKind = ErrorKind.FAILED,
    ) -> ProductOperationError:
        operation = CatalogOperation(context["operation"])
        if kind is ErrorKind.NOT_FOUND:
            logger.warning(
                "%s: product not found %s", message, context, extra={"context": context}
            )
        else:
            logger.exception("%s %s", message, context, extra={"context": context})
        PRODUCT_OPERATION_ERRORS.labels(operation=operation.value).inc()
        return ProductOperationError(operation, kind)
