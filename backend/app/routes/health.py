"""
Portfolio Backend — Health Check Route
========================================

What:  GET /api/health for monitoring and load balancer probes.
How:   Pings the database (SELECT 1) and asks the media store for its own
       health check, then reports an aggregate status.

Status levels:
    - healthy:   database and media store reachable
    - degraded:  media store unreachable
    - unhealthy: database unreachable

The endpoint always answers 200; the status field carries the verdict.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from app import __version__
from app.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    state = request.app.state
    db_status = "connected"
    media_status = "available"
    overall = "healthy"

    if not await state.database.ping():
        db_status = "disconnected"
        overall = "unhealthy"

    if not await state.media_store.health_check():
        media_status = "unavailable"
        if overall == "healthy":
            overall = "degraded"
        logger.warning("Health check: media store %s unreachable", state.media_store.name)

    return HealthResponse(
        status=overall,
        message="Portfolio API is running",
        version=__version__,
        environment=state.settings.environment,
        database=db_status,
        media_store=media_status,
        media_backend=state.media_store.name,
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
