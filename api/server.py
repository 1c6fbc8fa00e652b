"""
FastAPI application entry point.

Sets up the application with:
- Lifespan management (storage connect on startup, close on shutdown)
- Route registration
- Middleware configuration
- Error handling
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import set_storage_manager
from api.errors import register_exception_handlers
from api.routes import health_router, products_router
from core.config import Settings, settings
from core.logging import configure_logging, get_logger
from manager.storage_manager import StorageManager


logger = get_logger(__name__)


def create_app(
    app_settings: Optional[Settings] = None,
    storage_manager: Optional[StorageManager] = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        app_settings: Settings to run with (default: process-wide settings)
        storage_manager: Pre-built storage manager (default: built in lifespan)
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Startup: connect storage, giving up after the configured attempts.
        A StorageConnectionError here aborts startup, so the server never
        starts listening.

        Shutdown: close storage connections.
        """
        configure_logging(app_settings)

        logger.info(
            "Starting produk-api service...",
            storage_backend=app_settings.storage_backend,
        )

        manager = storage_manager or StorageManager(app_settings=app_settings)
        await manager.initialize()
        set_storage_manager(manager)

        logger.info(
            "produk-api service started",
            host=app_settings.server_host,
            port=app_settings.port,
            storage_backend=app_settings.storage_backend,
        )

        yield

        logger.info("Shutting down produk-api service...")

        set_storage_manager(None)
        await manager.shutdown()

        logger.info("produk-api service stopped")

    app = FastAPI(
        title="Produk API",
        description="CRUD service for the product catalogue.",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    app.include_router(health_router)
    app.include_router(products_router)

    register_exception_handlers(app, app_settings)

    return app


app = create_app()


def main() -> None:
    """Run the service under uvicorn."""
    import uvicorn

    uvicorn.run(
        "api.server:app",
        host=settings.server_host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
