# src/catalog/adapters/redis_cache.py
from __future__ import annotations

import logging

import redis.asyncio as redis

from catalog.domain.ports import CacheStorePort

logger = logging.getLogger(__name__)


class RedisCacheStore(CacheStorePort):
    """
    Adapter für einen externen Redis-Cache.

    Alle Keys werden mit key_prefix versehen. flush_all löscht nur Keys mit diesem
    Prefix, damit eine geteilte Redis-Instanz nicht komplett geleert wird.
    Das Löschen erfolgt per SCAN und ist daher best-effort, nicht atomar.
    """

    _SCAN_BATCH = 500

    def __init__(self, client: redis.Redis, key_prefix: str = "catalog:") -> None:
        self._client = client
        self._prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "catalog:") -> RedisCacheStore:
        client = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client=client, key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> str | None:
        value = await self._client.get(self._key(key))
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.set(self._key(key), value, ex=ttl_seconds)

    async def flush_all(self) -> None:
        batch: list[str] = []
        deleted = 0
        async for key in self._client.scan_iter(match=f"{self._prefix}*", count=self._SCAN_BATCH):
            batch.append(key)
            if len(batch) >= self._SCAN_BATCH:
                deleted += await self._client.delete(*batch)
                batch = []
        if batch:
            deleted += await self._client.delete(*batch)
        logger.debug("Flushed %d cache keys with prefix '%s'", deleted, self._prefix)

    async def close(self) -> None:
        await self._client.aclose()
