"""
Storage factory for creating repository instances.

This module picks the product repository implementation based on
configuration.
"""

from enum import Enum
from typing import TYPE_CHECKING

from core.logging import get_logger
from core.storage.base import BaseProductRepository


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


class StorageBackend(str, Enum):
    """Supported storage backends."""
    POSTGRES = "postgres"
    MEMORY = "memory"


def get_storage_backend(settings: "Settings") -> StorageBackend:
    """
    Determine which storage backend to use based on settings.

    Args:
        settings: Application settings

    Returns:
        The configured storage backend
    """
    backend_str = settings.storage_backend.lower()

    try:
        return StorageBackend(backend_str)
    except ValueError:
        raise ValueError(
            f"Unsupported storage backend: {backend_str}. "
            f"Supported backends: {[b.value for b in StorageBackend]}"
        )


def create_product_repository(settings: "Settings") -> BaseProductRepository:
    """
    Create a product repository based on settings.

    Args:
        settings: Application settings

    Returns:
        Configured repository instance (not yet initialized)

    Raises:
        ValueError: If the postgres backend is selected without DB_CONN
    """
    backend = get_storage_backend(settings)

    if backend == StorageBackend.MEMORY:
        from core.storage.memory import InMemoryProductRepository

        logger.info("Creating in-memory product repository")
        return InMemoryProductRepository()

    elif backend == StorageBackend.POSTGRES:
        from core.storage.postgres import PostgresProductRepository

        if not settings.db_conn:
            raise ValueError("DB_CONN is not set")

        logger.info(
            "Creating PostgreSQL product repository",
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
        return PostgresProductRepository(
            connection_string=settings.db_conn,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle_seconds=settings.db_pool_recycle_seconds,
            connect_timeout_seconds=settings.db_connect_timeout_seconds,
            echo=settings.debug,
        )

    else:
        raise ValueError(f"Unsupported backend: {backend}")
