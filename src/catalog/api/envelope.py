# src/catalog/api/envelope.py
"""
Einheitliches Antwortformat der API.

Jede JSON-Antwort trägt ein boolesches Top-Level-Feld ``success``. Erfolgreiche
Antworten liefern ``data`` (und bei Listen ``meta`` + ``links``), Fehler liefern
``message`` und optional ``errors``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.datastructures import URL

from catalog.domain.models import PaginationLinks, PaginationMeta, ProductPage


@dataclass(frozen=True)
class Paginator:
    """Paginierungsdaten einer Seite plus die Request-URL für die Links."""

    page: ProductPage
    url: URL

    def url_for(self, page_number: int) -> str:
        # Übrige Query-Parameter (search, per_page) bleiben erhalten
        return str(self.url.include_query_params(page=page_number))

    def meta(self) -> PaginationMeta:
        return PaginationMeta(
            current_page=self.page.page,
            from_=self.page.first_item,
            last_page=self.page.last_page,
            per_page=self.page.per_page,
            to=self.page.last_item,
            total=self.page.total,
        )

    def links(self) -> PaginationLinks:
        current, last = self.page.page, self.page.last_page
        return PaginationLinks(
            first=self.url_for(1),
            last=self.url_for(last),
            prev=self.url_for(current - 1) if current > 1 else None,
            next=self.url_for(current + 1) if current < last else None,
        )


def _serialize(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list | tuple):
        return [_serialize(item) for item in data]
    return jsonable_encoder(data)


def success_response(
    data: Any,
    paginator: Paginator | None = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    body: dict[str, Any] = {"success": True, "data": _serialize(data)}

    if paginator is not None:
        body["meta"] = _serialize(paginator.meta())
        body["links"] = _serialize(paginator.links())

    return JSONResponse(content=body, status_code=status_code)


def error_response(
    message: str,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    errors: dict[str, list[str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return JSONResponse(content=body, status_code=status_code, headers=headers)


def created_response(data: Any) -> JSONResponse:
    return success_response(data, status_code=status.HTTP_201_CREATED)


def no_content_response() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)
