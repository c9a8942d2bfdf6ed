"""Cache key patterns for the product catalog."""

from __future__ import annotations

import json

PRODUCTS_COLLECTION = "products"
PRODUCT_SINGLE = "product"


def product_list_key(page: int, per_page: int, search: str | None) -> str:
    """
    Key for one page of the product listing.

    The parameters are JSON-encoded, so an absent search term (``null``) can never
    collide with a real term such as ``""`` or ``"null"`` (``"\\"null\\""``).
    """
    return f"{PRODUCTS_COLLECTION}:{json.dumps([page, per_page, search], ensure_ascii=False)}"


def product_key(product_id: str) -> str:
    """Key for a single product."""
    return f"{PRODUCT_SINGLE}:{json.dumps(product_id, ensure_ascii=False)}"
