"""
Product endpoints.

Provides CRUD operations for products:
- GET    /api/produk       - List products
- POST   /api/produk       - Create product
- GET    /api/produk/{id}  - Get product
- PUT    /api/produk/{id}  - Replace product
- DELETE /api/produk/{id}  - Delete product

Missing products surface as ProductNotFoundError and storage failures as
StorageUnavailableError; api/errors.py turns both into responses.
Anything else under /api/produk/ is answered with 400 (the remainder is
not an id) or 405 (it is, but the method is wrong).
"""

import re

from fastapi import APIRouter, Depends, Path, status

from api.dependencies import get_product_repository
from api.schemas.product import (
    INT32_MAX,
    INT32_MIN,
    ProductCreateRequest,
    ProductDeleteResponse,
    ProductResponse,
    ProductUpdateRequest,
)
from core.errors import BadRequestError, MethodNotAllowedError
from core.logging import get_logger
from core.storage import BaseProductRepository


logger = get_logger(__name__)
router = APIRouter(prefix="/api/produk", tags=["Products"])

ITEM_METHODS = ("GET", "PUT", "DELETE")
_NUMERIC_ID = re.compile(r"^[+-]?\d+$")


@router.get("", response_model=list[ProductResponse])
async def list_products(
    repository: BaseProductRepository = Depends(get_product_repository),
) -> list[ProductResponse]:
    """
    List all products, highest id first.

    Always returns a JSON array, empty when there are no products.
    """
    records = await repository.list_all()
    logger.debug("Listed products", count=len(records))
    return [ProductResponse.from_record(record) for record in records]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: ProductCreateRequest,
    repository: BaseProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """
    Create a new product.

    The id and created_at are assigned by storage and echoed back
    with the submitted fields.
    """
    record = await repository.create(request.to_draft())

    logger.info(
        "Product created",
        product_id=record.id,
        name=record.name,
    )
    return ProductResponse.from_record(record)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int = Path(..., ge=INT32_MIN, le=INT32_MAX),
    repository: BaseProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """Get a single product by id."""
    record = await repository.get(product_id)
    return ProductResponse.from_record(record)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    request: ProductUpdateRequest,
    product_id: int = Path(..., ge=INT32_MIN, le=INT32_MAX),
    repository: BaseProductRepository = Depends(get_product_repository),
) -> ProductResponse:
    """
    Replace a product.

    Every mutable field is overwritten with the request body; fields
    are not merged. id and created_at are kept.
    """
    record = await repository.update(product_id, request.to_draft())

    logger.info(
        "Product updated",
        product_id=product_id,
    )
    return ProductResponse.from_record(record)


@router.delete("/{product_id}", response_model=ProductDeleteResponse)
async def delete_product(
    product_id: int = Path(..., ge=INT32_MIN, le=INT32_MAX),
    repository: BaseProductRepository = Depends(get_product_repository),
) -> ProductDeleteResponse:
    """Delete a product."""
    await repository.delete(product_id)

    logger.info(
        "Product deleted",
        product_id=product_id,
    )
    return ProductDeleteResponse(id=product_id)


@router.api_route(
    "/{remainder:path}",
    methods=["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
async def unmatched_item_path(remainder: str) -> None:
    """
    Everything under the item prefix the routes above did not take.

    The whole remainder is the id: a non-numeric one (empty, extra
    segments) is a bad request, a numeric one means the method is wrong.
    Registered last so the item routes match first.
    """
    if not _NUMERIC_ID.match(remainder):
        raise BadRequestError("Invalid ID")
    raise MethodNotAllowedError(ITEM_METHODS)
