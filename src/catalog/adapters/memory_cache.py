from __future__ import annotations

import time

from catalog.domain.ports import CacheStorePort


class InMemoryCacheStore(CacheStorePort):
    """
    Einfacher TTL-basierter In-Memory Cache.
    Nur prozesslokal gültig; mehrere Worker teilen sich keinen Zustand.
    """

    def __init__(self) -> None:
        # Key: Cache-Key, Value: (JSON-Snapshot, Ablaufzeitpunkt)
        self._storage: dict[str, tuple[str, float]] = {}

    async def get(self, key: str) -> str | None:
        """Holt einen Eintrag aus dem Cache, sofern vorhanden und nicht abgelaufen."""
        if key not in self._storage:
            return None

        value, expires_at = self._storage[key]
        if time.time() >= expires_at:
            del self._storage[key]
            return None

        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        now = time.time()
        # Abgelaufene Einträge aufräumen
        expired = [k for k, (_, expires_at) in self._storage.items() if now >= expires_at]
        for k in expired:
            del self._storage[k]
        self._storage[key] = (value, now + ttl_seconds)

    async def flush_all(self) -> None:
        self._storage.clear()

    def __len__(self) -> int:
        return len(self._storage)
