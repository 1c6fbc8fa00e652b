"""
Health check endpoints.

Provides endpoints for monitoring and load balancer health checks.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_storage_manager
from core.logging import get_logger
from manager.storage_manager import StorageManager


logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """
    Liveness check.

    Returns 200 whenever the process is serving, whatever the state
    of storage.
    """
    return {
        "status": "healthy",
        "service": "produk-api",
    }


@router.get("/ready")
async def readiness_check(
    manager: StorageManager = Depends(get_storage_manager),
):
    """
    Readiness check.

    Returns 200 if storage answers a ping, 503 otherwise.
    """
    if await manager.check_ready():
        return {
            "status": "ready",
            "checks": {"storage": "ok"},
        }

    logger.warning("Readiness check failed: storage unreachable")
    return JSONResponse(
        status_code=503,
        content={
            "status": "unavailable",
            "checks": {"storage": "unreachable"},
        },
    )
