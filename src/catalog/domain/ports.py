# src/catalog/domain/ports.py
from abc import ABC, abstractmethod
from enum import StrEnum


class CacheStorePort(ABC):
    """
    Abstrakte Schnittstelle für den Read-Through-Cache.
    Werte sind bereits serialisierte JSON-Strings; der Store kennt keine Domain-Typen.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Liefert den gespeicherten Wert oder None bei Miss bzw. abgelaufener TTL."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Speichert einen Wert, der nach ttl_seconds als veraltet gilt."""
        ...

    @abstractmethod
    async def flush_all(self) -> None:
        """Verwirft sämtliche Einträge (globale Invalidierung)."""
        ...

    async def close(self) -> None:
        """Gibt Verbindungen frei. Default: nichts zu tun."""
        return None


# ---------------------------------------------------------------------------
# Custom Domain Exceptions
# ---------------------------------------------------------------------------


class ProductNotFoundError(Exception):
    def __init__(self, product_id: str):
        super().__init__(f"Product '{product_id}' not found")
        self.product_id = product_id


class CatalogOperation(StrEnum):
    LIST = "list"
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    FAILED = "failed"


class ProductOperationError(Exception):
    """
    Typisierter Fehler einer Katalog-Operation.
    Die Ursache hängt als __cause__ am Fehler, wird aber nie an den Client ausgeliefert.
    """

    def __init__(self, operation: CatalogOperation, kind: ErrorKind = ErrorKind.FAILED):
        super().__init__(f"Product operation '{operation}' failed ({kind})")
        self.operation = operation
        self.kind = kind
