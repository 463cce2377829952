"""
Health Check Endpoints.

- /health: Liveness check (process running)
- /health/ready: Readiness check (database reachable)
"""

from typing import Any

from fastapi import APIRouter, HTTPException
from sqlalchemy import text

from modules.backend.core.database import get_session_factory
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database() -> dict[str, Any]:
    """
    Check database connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    try:
        start = utc_now()
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
        latency_ms = int((utc_now() - start).total_seconds() * 1000)
        return {"status": "healthy", "latency_ms": latency_ms}

    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": "Database unavailable"}


@router.get("/health", summary="Liveness check")
async def health() -> dict[str, Any]:
    """Process is up."""
    return {"status": "healthy", "timestamp": utc_now().isoformat()}


@router.get("/health/ready", summary="Readiness check")
async def health_ready() -> dict[str, Any]:
    """Database is reachable; 503 otherwise."""
    database = await check_database()
    if database["status"] != "healthy":
        raise HTTPException(
            status_code=503,
            detail={"status": "unhealthy", "checks": {"database": database}},
        )
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "checks": {"database": database},
    }
