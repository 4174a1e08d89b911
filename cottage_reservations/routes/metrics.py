"""
Prometheus scrape endpoint.

Example:
    GET /metrics

    Response:
        # HELP cottage_reservation_operations_total Total reservation lifecycle operations by outcome
        # TYPE cottage_reservation_operations_total counter
        cottage_reservation_operations_total{operation="create",outcome="success"} 12.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """Expose lifecycle, availability and lock-wait metrics in Prometheus text format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
