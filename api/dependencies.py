"""
FastAPI dependencies for dependency injection.

Provides the storage manager and product repository to route handlers.
"""

from typing import Optional

from core.storage import BaseProductRepository
from manager.storage_manager import StorageManager


# Global singleton (set during app lifespan)
_storage_manager: Optional[StorageManager] = None


def set_storage_manager(manager: Optional[StorageManager]) -> None:
    """Set (or clear) the global storage manager instance."""
    global _storage_manager
    _storage_manager = manager


async def get_storage_manager() -> StorageManager:
    """Dependency that provides the storage manager."""
    if _storage_manager is None:
        raise RuntimeError("Storage manager not initialized")
    return _storage_manager


async def get_product_repository() -> BaseProductRepository:
    """
    Dependency that provides the product repository.

    Usage:
        @router.get("")
        async def list_products(
            repository: BaseProductRepository = Depends(get_product_repository)
        ):
            ...
    """
    manager = await get_storage_manager()
    return manager.repository
