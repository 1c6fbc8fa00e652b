"""
In-memory storage backend implementation.

Keeps products in a dict guarded by an asyncio.Lock. Nothing survives a
restart; useful for local development and tests.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from core.errors import ProductNotFoundError
from core.logging import get_logger
from core.storage.base import BaseProductRepository, ProductDraft, ProductRecord


logger = get_logger(__name__)


class InMemoryProductRepository(BaseProductRepository):
    """
    Product repository backed by a process-local dict.

    Ids come from a counter that only moves forward, so an id is never
    handed out twice even after deletes. Every read and write happens
    under one lock.
    """

    def __init__(self, initial: Optional[list[ProductDraft]] = None):
        """
        Initialize the repository.

        Args:
            initial: Optional drafts to seed the collection with
        """
        self._products: dict[int, ProductRecord] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()
        for draft in initial or []:
            self._insert(draft)

    def _insert(self, draft: ProductDraft) -> ProductRecord:
        record = ProductRecord(
            id=self._next_id,
            created_at=datetime.now(timezone.utc),
            name=draft.name,
            price=draft.price,
            stock=draft.stock,
        )
        self._products[record.id] = record
        self._next_id += 1
        return record

    async def setup(self) -> None:
        logger.info("In-memory product repository initialized", count=len(self._products))

    async def ping(self) -> None:
        pass

    async def list_all(self) -> list[ProductRecord]:
        async with self._lock:
            return sorted(self._products.values(), key=lambda p: p.id, reverse=True)

    async def get(self, product_id: int) -> ProductRecord:
        async with self._lock:
            record = self._products.get(product_id)
            if record is None:
                raise ProductNotFoundError(product_id)
            return record

    async def create(self, draft: ProductDraft) -> ProductRecord:
        async with self._lock:
            record = self._insert(draft)

        logger.debug("Product stored", product_id=record.id)
        return record

    async def update(self, product_id: int, draft: ProductDraft) -> ProductRecord:
        async with self._lock:
            current = self._products.get(product_id)
            if current is None:
                raise ProductNotFoundError(product_id)
            record = current.replaced_with(draft)
            self._products[product_id] = record
            return record

    async def delete(self, product_id: int) -> None:
        async with self._lock:
            if self._products.pop(product_id, None) is None:
                raise ProductNotFoundError(product_id)

    async def close(self) -> None:
        logger.info("In-memory product repository closed")
