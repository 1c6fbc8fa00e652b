"""
Error taxonomy shared by the storage layer and the API.

Storage backends raise ServiceError subclasses; each carries an ErrorKind.
The API translates kinds to HTTP statuses in exactly one place
(api/errors.py), so nothing below the router knows about HTTP.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Categories of failure a request can end in."""
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    INTERNAL = "internal"


class ServiceError(Exception):
    """Base exception for product service operations."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or ""


class BadRequestError(ServiceError):
    """Request could not be understood."""
    kind = ErrorKind.BAD_REQUEST


class MethodNotAllowedError(ServiceError):
    """Method not supported on this endpoint."""
    kind = ErrorKind.METHOD_NOT_ALLOWED

    def __init__(self, allowed: tuple[str, ...] = ()):
        super().__init__()
        self.allowed = allowed


class ProductNotFoundError(ServiceError):
    """No product with the given id."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class StorageUnavailableError(ServiceError):
    """Storage is unreachable or a query failed."""
    kind = ErrorKind.INTERNAL


class StorageConnectionError(StorageUnavailableError):
    """Initial storage connection could not be established."""
    pass
