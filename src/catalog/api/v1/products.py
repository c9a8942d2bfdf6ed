from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status

from catalog.api.dependencies import get_product_service
from catalog.api.envelope import (
    Paginator,
    created_response,
    no_content_response,
    success_response,
)
from catalog.core.config import Settings, get_settings
from catalog.domain.models import ErrorEnvelope, ProductCreate, ProductUpdate
from catalog.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
SettingsDep = Annotated[Settings, Depends(get_settings)]

# OFFSET muss als 64-Bit-Integer darstellbar bleiben
MAX_PAGE = 2**31 - 1

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorEnvelope},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorEnvelope},
}


@router.get("", responses=_ERROR_RESPONSES)
async def list_products(
    request: Request,
    service: ProductServiceDep,
    settings: SettingsDep,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    per_page: int | None = Query(None, ge=1),
    search: str | None = Query(None),
) -> Response:
    """
    Listet Produkte, neueste zuerst, optional gefiltert nach Namen.
    """
    effective_per_page = min(per_page or settings.default_per_page, settings.max_per_page)
    result = await service.list_products(page=page, per_page=effective_per_page, search=search)
    return success_response(result.items, Paginator(page=result, url=request.url))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def create_product(service: ProductServiceDep, payload: ProductCreate) -> Response:
    product = await service.create_product(payload)
    return created_response(product)


@router.get(
    "/{product_id}",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorEnvelope}},
)
async def get_product(service: ProductServiceDep, product_id: str) -> Response:
    product = await service.get_product(product_id)
    return success_response(product)


@router.put("/{product_id}", responses=_ERROR_RESPONSES)
@router.patch("/{product_id}", responses=_ERROR_RESPONSES)
async def update_product(
    service: ProductServiceDep, product_id: str, payload: ProductUpdate
) -> Response:
    """
    Aktualisiert nur die im Body gesendeten Felder.
    """
    product = await service.update_product(product_id, payload)
    return success_response(product)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_ERROR_RESPONSES,
)
async def delete_product(service: ProductServiceDep, product_id: str) -> Response:
    await service.delete_product(product_id)
    return no_content_response()
