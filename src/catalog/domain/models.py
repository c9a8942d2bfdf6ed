# src/catalog/domain/models.py
from __future__ import annotations

import math
from datetime import datetime
from decimal import Decimal
from typing import Any, Self

from pydantic import BaseModel, Field, field_validator, model_validator

_CENT = Decimal("0.01")
# Obergrenze der INTEGER-Spalte (64 Bit, signed)
_MAX_STOCK = 2**63 - 1

# ---------------------------------------------------------------------------
# Aggregate: Product
# ---------------------------------------------------------------------------


class Product(BaseModel):
    """
    Einziges Domain-Objekt des Katalogs.
    Die ID wird beim Anlegen vergeben und ist danach unveränderlich.
    """

    id: str = Field(description="Stabiler, opaker Identifier (UUID4)")
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0, le=_MAX_STOCK)

    # Default-Sortierung: created_at absteigend (neueste zuerst)
    created_at: datetime
    updated_at: datetime

    model_config = {"frozen": True}


class ProductPage(BaseModel):
    """Eine Seite von Produkten samt Gesamtanzahl der Treffer."""

    items: list[Product]
    total: int = Field(ge=0)
    page: int = Field(ge=1)
    per_page: int = Field(ge=1)

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    @property
    def first_item(self) -> int | None:
        if not self.items:
            return None
        return (self.page - 1) * self.per_page + 1

    @property
    def last_item(self) -> int | None:
        first = self.first_item
        if first is None:
            return None
        return first + len(self.items) - 1

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# API Request Schemas
# ---------------------------------------------------------------------------


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0, le=_MAX_STOCK)

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("price")
    @classmethod
    def normalize_price(cls, value: Decimal) -> Decimal:
        return value.quantize(_CENT)


class ProductUpdate(BaseModel):
    """
    Teil- oder Vollupdate. Nur explizit gesendete Felder werden übernommen,
    fehlende Felder bleiben unverändert.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    stock: int | None = Field(default=None, ge=0, le=_MAX_STOCK)

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="after")
    def required_fields_not_null(self) -> Self:
        for field in ("name", "price", "stock"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} darf nicht null sein")
        return self

    @field_validator("price")
    @classmethod
    def normalize_price(cls, value: Decimal | None) -> Decimal | None:
        return value.quantize(_CENT) if value is not None else None

    def changes(self) -> dict[str, Any]:
        """Liefert nur die im Request gesetzten Felder."""
        return self.model_dump(exclude_unset=True)


# ---------------------------------------------------------------------------
# Response Envelope Schemas
# ---------------------------------------------------------------------------


class PaginationMeta(BaseModel):
    current_page: int
    from_: int | None = Field(alias="from")
    last_page: int
    per_page: int
    to: int | None
    total: int

    model_config = {"populate_by_name": True}


class PaginationLinks(BaseModel):
    first: str
    last: str
    prev: str | None = None
    next: str | None = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    errors: dict[str, list[str]] | None = None
