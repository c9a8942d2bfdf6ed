# src/catalog/api/errors.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog.api.envelope import error_response
from catalog.domain.ports import CatalogOperation, ErrorKind, ProductOperationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Übersetzung (Operation, Fehlerart) -> (Status-Code, Meldung)
# Not-Found wird nur bei GET als 404 ausgeliefert; UPDATE und DELETE melden
# einen unbekannten Identifier wie jeden anderen Fehler (Kompatibilität mit
# bestehenden Clients).
# ---------------------------------------------------------------------------

_FETCH_FAILED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch products")
_NOT_FOUND = (status.HTTP_404_NOT_FOUND, "Product not found")
_CREATE_FAILED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create product")
_UPDATE_FAILED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update product")
_DELETE_FAILED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete product")

OPERATION_ERRORS: dict[tuple[CatalogOperation, ErrorKind], tuple[int, str]] = {
    (CatalogOperation.LIST, ErrorKind.NOT_FOUND): _FETCH_FAILED,
    (CatalogOperation.LIST, ErrorKind.FAILED): _FETCH_FAILED,
    (CatalogOperation.GET, ErrorKind.NOT_FOUND): _NOT_FOUND,
    (CatalogOperation.GET, ErrorKind.FAILED): _NOT_FOUND,
    (CatalogOperation.CREATE, ErrorKind.NOT_FOUND): _CREATE_FAILED,
    (CatalogOperation.CREATE, ErrorKind.FAILED): _CREATE_FAILED,
    (CatalogOperation.UPDATE, ErrorKind.NOT_FOUND): _UPDATE_FAILED,
    (CatalogOperation.UPDATE, ErrorKind.FAILED): _UPDATE_FAILED,
    (CatalogOperation.DELETE, ErrorKind.NOT_FOUND): _DELETE_FAILED,
    (CatalogOperation.DELETE, ErrorKind.FAILED): _DELETE_FAILED,
}

VALIDATION_MESSAGE = "The given data was invalid."


def _field_path(loc: tuple[int | str, ...]) -> str:
    # Erstes Element ist die Quelle ("body", "query", "path")
    parts = [str(part) for part in loc[1:]] or [str(part) for part in loc]
    return ".".join(parts)


async def product_operation_error_handler(
    request: Request, exc: ProductOperationError
) -> JSONResponse:
    status_code, message = OPERATION_ERRORS[(exc.operation, exc.kind)]
    return error_response(message, status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        errors.setdefault(_field_path(tuple(error.get("loc", ()))), []).append(error["msg"])
    return error_response(VALIDATION_MESSAGE, status.HTTP_422_UNPROCESSABLE_ENTITY, errors=errors)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(str(exc.detail), exc.status_code, headers=exc.headers)


def rate_limit_error_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # SlowAPIMiddleware ruft diesen Handler synchron auf
    logger.warning("Rate limit exceeded for %s: %s", request.client, exc.detail)
    return error_response(
        f"Rate limit exceeded: {exc.detail}", status.HTTP_429_TOO_MANY_REQUESTS
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    handlers = {
        ProductOperationError: product_operation_error_handler,
        RequestValidationError: validation_error_handler,
        StarletteHTTPException: http_error_handler,
        RateLimitExceeded: rate_limit_error_handler,
        Exception: unhandled_error_handler,
    }
    for exc_class, handler in handlers.items():
        app.add_exception_handler(exc_class, handler)  # type: ignore[arg-type]
