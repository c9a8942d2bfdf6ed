# src/catalog/api/dependencies.py
from fastapi import Depends

from catalog.adapters.memory_cache import InMemoryCacheStore
from catalog.adapters.redis_cache import RedisCacheStore
from catalog.core.config import Settings, get_settings
from catalog.domain.ports import CacheStorePort
from catalog.repositories.base import AbstractProductRepository
from catalog.repositories.sqlite_product_repository import SQLiteProductRepository
from catalog.services.product_service import ProductService

# Singleton Repository (Initialisiert beim ersten Zugriff)
_repository: AbstractProductRepository | None = None


async def get_product_repository(
    settings: Settings = Depends(get_settings),
) -> AbstractProductRepository:
    global _repository
    if _repository is None:
        repo = SQLiteProductRepository(database_url=settings.database_url)
        await repo.initialize()
        _repository = repo
    return _repository


# Singleton Cache Store
_cache_store: CacheStorePort | None = None


def get_cache_store(
    settings: Settings = Depends(get_settings),
) -> CacheStorePort:
    global _cache_store
    if _cache_store is None:
        if settings.cache_backend == "redis":
            _cache_store = RedisCacheStore.from_url(
                settings.redis_url, key_prefix=settings.cache_key_prefix
            )
        else:
            _cache_store = InMemoryCacheStore()
    return _cache_store


def get_product_service(
    repository: AbstractProductRepository = Depends(get_product_repository),
    cache: CacheStorePort = Depends(get_cache_store),
    settings: Settings = Depends(get_settings),
) -> ProductService:
    return ProductService(
        repository=repository,
        cache=cache,
        cache_ttl_seconds=settings.cache_ttl_seconds,
        call_timeout_seconds=settings.call_timeout_seconds,
    )


async def close_resources() -> None:
    """Schließt Repository und Cache beim Shutdown und setzt die Singletons zurück."""
    global _repository, _cache_store
    if _repository is not None:
        await _repository.close()
        _repository = None
    if _cache_store is not None:
        await _cache_store.close()
        _cache_store = None
