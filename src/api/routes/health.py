import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from src.config import get_settings

logger = logging.getLogger("stockwatch.api.health")

router = APIRouter(prefix="/api", tags=["health"])

STARTED_AT = time.monotonic()


@router.get("/health")
def health_check():
    try:
        settings = get_settings()
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - STARTED_AT, 3),
            "version": settings.app_version,
            "database": "configured" if settings.database_configured else "not configured",
        }
    except Exception:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=500,
            content={
                "status": "unhealthy",
                "error": "Health check failed",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )


@router.head("/health")
def health_head():
    # Connectivity check
    return Response(status_code=200)
