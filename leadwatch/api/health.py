"""
Health check endpoints for monitoring and container orchestration.
"""
import time

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from leadwatch.api.errors import build_error_payload
from leadwatch.core.config import settings
from leadwatch.core.database import get_db
from leadwatch.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="", tags=["health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_db)):
    """Check the database and the scan worker."""
    start_time = time.perf_counter()

    db_status = "healthy"
    db_latency = 0.0
    try:
        db_start = time.perf_counter()
        await session.execute(text("SELECT 1"))
        db_latency = round((time.perf_counter() - db_start) * 1000, 2)
    except Exception as e:
        logger.error("health_db_error", error=str(e))
        db_status = "unhealthy"

    # The scan worker is optional for serving reads, so a silent worker only degrades
    celery_status = "healthy"
    celery_detail = None
    try:
        from leadwatch.celery.config import celery_app

        insp = celery_app.control.inspect(timeout=1.0)
        ping = insp.ping() or {}
        if not ping:
            celery_status = "degraded"
            celery_detail = "No celery worker responded to ping"
    except Exception as e:
        celery_status = "unhealthy"
        celery_detail = str(e)

    components = {
        "database": {"status": db_status, "latency_ms": db_latency},
        "celery": {"status": celery_status, "detail": celery_detail},
    }
    is_healthy = all(c["status"] == "healthy" for c in components.values())

    return {
        "status": "healthy" if is_healthy else "degraded",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "components": components,
        "total_latency_ms": round((time.perf_counter() - start_time) * 1000, 2),
    }


@router.get("/health/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """
    Readiness check - verifies database connection.
    """
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "ready", "database": "connected"}
    except Exception as e:
        logger.error("readiness_failed", error=str(e))
        raise HTTPException(
            status_code=503,
            detail=build_error_payload(
                code="readiness_failed",
                message="Database unavailable",
                detail=str(e),
            ),
        )


@router.get("/health/live")
async def liveness_check():
    """Liveness check - the process is up."""
    return {"status": "alive"}
