"""
Storage abstraction layer.

Provides pluggable product repositories.

Supported backends:
- PostgreSQL (production)
- In-memory (development and tests)
"""

from core.storage.base import (
    BaseProductRepository,
    ProductDraft,
    ProductRecord,
)
from core.storage.factory import (
    create_product_repository,
    get_storage_backend,
    StorageBackend,
)

__all__ = [
    # Abstract interface and records
    "BaseProductRepository",
    "ProductDraft",
    "ProductRecord",
    # Factory functions
    "create_product_repository",
    "get_storage_backend",
    "StorageBackend",
]
