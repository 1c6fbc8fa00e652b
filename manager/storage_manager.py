"""
Storage lifecycle manager.

Sits between the API lifespan and the product repository: connects at
startup (with a bounded retry loop), answers readiness checks, and
releases connections at shutdown.
"""

import asyncio
from typing import Optional

from core.config import Settings, settings
from core.errors import StorageConnectionError, StorageUnavailableError
from core.logging import get_logger
from core.storage import BaseProductRepository, create_product_repository


logger = get_logger(__name__)


class StorageManager:
    """
    Owns the product repository for the lifetime of the process.

    - Create the repository from configuration
    - Connect with a fixed-delay retry loop
    - Hand the repository to request handlers
    - Close it on shutdown

    Usage:
        manager = StorageManager()
        await manager.initialize()   # raises StorageConnectionError if it gives up
        repo = manager.repository
        ...
        await manager.shutdown()
    """

    def __init__(
        self,
        repository: Optional[BaseProductRepository] = None,
        app_settings: Optional[Settings] = None,
        connect_attempts: Optional[int] = None,
        retry_delay_seconds: Optional[float] = None,
    ):
        """
        Initialize the manager.

        Args:
            repository: Optional repository instance (default: built from settings)
            app_settings: Settings to use (default: process-wide settings)
            connect_attempts: Total connection attempts (default from config)
            retry_delay_seconds: Pause between attempts (default from config)
        """
        self._settings = app_settings or settings
        self._repository = repository
        self.connect_attempts = (
            connect_attempts if connect_attempts is not None
            else self._settings.db_connect_attempts
        )
        self.retry_delay = (
            retry_delay_seconds if retry_delay_seconds is not None
            else self._settings.db_connect_retry_delay_seconds
        )
        self._initialized = False

    async def initialize(self) -> None:
        """
        Create and connect the repository.

        Each attempt runs setup() then ping(). After the last failed
        attempt StorageConnectionError is raised and the repository is
        closed.
        """
        if self._initialized:
            return

        if self._repository is None:
            self._repository = create_product_repository(self._settings)

        logger.info(
            "Starting connection attempts",
            storage_backend=self._settings.storage_backend,
            attempts=self.connect_attempts,
        )

        last_error: Optional[StorageUnavailableError] = None
        for attempt in range(1, self.connect_attempts + 1):
            try:
                await self._repository.setup()
                await self._repository.ping()
            except StorageUnavailableError as e:
                last_error = e
                logger.warning(
                    "Storage connection attempt failed",
                    attempt=attempt,
                    max_attempts=self.connect_attempts,
                    error=e.message,
                    retry_in_seconds=self.retry_delay,
                )
                if attempt < self.connect_attempts:
                    await asyncio.sleep(self.retry_delay)
                continue
            except Exception:
                # not retryable; release whatever setup() opened
                await self._repository.close()
                raise

            self._initialized = True
            logger.info("Storage connected", attempt=attempt)
            return

        logger.error(
            "Could not connect to storage, giving up",
            attempts=self.connect_attempts,
        )
        await self._repository.close()
        raise StorageConnectionError(
            f"Could not connect to storage after {self.connect_attempts} attempts"
        ) from last_error

    async def shutdown(self) -> None:
        """Close the repository and release its connections."""
        logger.info("Shutting down storage manager")

        if self._repository is not None:
            await self._repository.close()

        self._initialized = False
        logger.info("Storage manager shut down")

    async def check_ready(self) -> bool:
        """Ping storage; False when it is unreachable or not yet connected."""
        if not self._initialized:
            return False
        try:
            await self._repository.ping()
        except StorageUnavailableError:
            return False
        return True

    @property
    def repository(self) -> BaseProductRepository:
        self._ensure_initialized()
        return self._repository

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def _ensure_initialized(self) -> None:
        """Raise unless initialize() has completed."""
        if not self._initialized:
            raise RuntimeError(
                "Storage manager not initialized. Call initialize() first."
            )
