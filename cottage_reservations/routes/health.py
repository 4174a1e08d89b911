"""
Liveness and readiness probes.

/health only says the process is up. /ready says whether bookings can be
served, which needs the database.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from cottage_reservations.db.engine import check_engine_health

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check() -> JSONResponse:
    """
    Liveness probe. Always 200 while the process can answer requests.

    Example:
        >>> GET /health
        {"status": "ok"}
    """
    return JSONResponse(content={"status": "ok"})


@router.get("/ready")
def readiness_check() -> JSONResponse:
    """
    Readiness probe. 200 when the reservation database answers, 503 otherwise.

    Example:
        >>> GET /ready
        {"status": "ready", "checks": {"database": "ok"}}
    """
    if not check_engine_health():
        logger.error("readiness_check_failed", reason="database_not_accessible")
        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "checks": {"database": "failed"}},
        )

    return JSONResponse(content={"status": "ready", "checks": {"database": "ok"}})
