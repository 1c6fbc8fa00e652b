"""
Pydantic schemas for API request/response validation.
"""

from api.schemas.product import (
    ProductCreateRequest,
    ProductDeleteResponse,
    ProductResponse,
    ProductUpdateRequest,
)

__all__ = [
    "ProductCreateRequest",
    "ProductDeleteResponse",
    "ProductResponse",
    "ProductUpdateRequest",
]
