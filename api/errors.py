"""
Translation of service errors into HTTP responses.

STATUS_BY_KIND is the only place an ErrorKind becomes a status code.
"""

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import Settings
from core.errors import ErrorKind, MethodNotAllowedError, ServiceError
from core.logging import get_logger


logger = get_logger(__name__)


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.METHOD_NOT_ALLOWED: status.HTTP_405_METHOD_NOT_ALLOWED,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(kind: ErrorKind) -> int:
    """HTTP status code for an error kind."""
    return STATUS_BY_KIND[kind]


def validation_error_message(exc: RequestValidationError) -> str:
    """
    Short client message for a failed request validation.

    Path parameter failures mean the id was not a number; anything else
    is a body that could not be decoded into a product.
    """
    for error in exc.errors():
        loc = error.get("loc") or ()
        if loc and loc[0] == "path":
            return "Invalid ID"
    return "Invalid JSON"


def register_exception_handlers(app: FastAPI, app_settings: Settings) -> None:
    """Install the handlers that map every failure to a status code."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if isinstance(exc, MethodNotAllowedError):
            headers = {"Allow": ", ".join(exc.allowed)} if exc.allowed else None
            return Response(status_code=status_for(exc.kind), headers=headers)

        if exc.kind == ErrorKind.INTERNAL:
            logger.error(
                "Storage failure",
                path=request.url.path,
                method=request.method,
                error=exc.message,
            )
            message = exc.message if app_settings.debug else "Internal server error"
        else:
            message = exc.message
        return JSONResponse(
            status_code=status_for(exc.kind),
            content={"detail": message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.debug(
            "Rejected request",
            path=request.url.path,
            method=request.method,
            errors=len(exc.errors()),
        )
        return JSONResponse(
            status_code=status_for(ErrorKind.BAD_REQUEST),
            content={"detail": validation_error_message(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status_for(ErrorKind.METHOD_NOT_ALLOWED):
            return Response(
                status_code=exc.status_code,
                headers=getattr(exc, "headers", None),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=status_for(ErrorKind.INTERNAL),
            content={
                "detail": "Internal server error",
                "message": str(exc) if app_settings.debug else "An error occurred",
            },
        )
