"""
Abstract base classes for storage backends.

This module defines the contract every product repository must follow,
so the API can run unchanged on a relational table or in memory.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ProductDraft:
    """
    The mutable fields of a product.

    Used both as a creation candidate and as a wholesale replacement.
    """
    name: str
    price: int
    stock: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "price": self.price, "stock": self.stock}


@dataclass(frozen=True)
class ProductRecord:
    """A stored product, including storage-generated fields."""
    id: int
    created_at: datetime
    name: str
    price: int
    stock: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "created_at": self.created_at,
            "name": self.name,
            "price": self.price,
            "stock": self.stock,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductRecord":
        """Create from a row mapping or dictionary."""
        return cls(
            id=data["id"],
            created_at=data["created_at"],
            name=data["name"],
            price=data["price"],
            stock=data["stock"],
        )

    def replaced_with(self, draft: ProductDraft) -> "ProductRecord":
        """Copy of this record with every mutable field taken from draft."""
        return ProductRecord(
            id=self.id,
            created_at=self.created_at,
            name=draft.name,
            price=draft.price,
            stock=draft.stock,
        )


class BaseProductRepository(ABC):
    """
    Abstract base class for product storage.

    Implementations own the authoritative product collection. Missing
    products raise ProductNotFoundError; any other storage failure is
    raised as StorageUnavailableError.
    """

    @abstractmethod
    async def setup(self) -> None:
        """
        Initialize the storage (engine, tables).

        This should be idempotent.
        """
        pass

    @abstractmethod
    async def ping(self) -> None:
        """
        Check that storage is reachable.

        Raises:
            StorageUnavailableError: If it is not
        """
        pass

    @abstractmethod
    async def list_all(self) -> list[ProductRecord]:
        """
        Get all products, newest id first.

        Returns an empty list when there are none.
        """
        pass

    @abstractmethod
    async def get(self, product_id: int) -> ProductRecord:
        """
        Get a product by id.

        Raises:
            ProductNotFoundError: If no product has this id
        """
        pass

    @abstractmethod
    async def create(self, draft: ProductDraft) -> ProductRecord:
        """
        Store a new product.

        Assigns a fresh id and created_at and returns the stored record.
        """
        pass

    @abstractmethod
    async def update(self, product_id: int, draft: ProductDraft) -> ProductRecord:
        """
        Replace every mutable field of a product.

        id and created_at are preserved.

        Raises:
            ProductNotFoundError: If no product has this id
        """
        pass

    @abstractmethod
    async def delete(self, product_id: int) -> None:
        """
        Remove a product.

        Raises:
            ProductNotFoundError: If no product has this id
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources."""
        pass
