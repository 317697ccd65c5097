"""
SocialNet Backend — Health Check Route
========================================

What:  GET /health for container probes and load balancers.
How:   Runs `SELECT 1` through the shared engine.

    200 {"status": "OK",    ..., "database": {"connected": true,  "error": null}}
    503 {"status": "ERROR", ..., "database": {"connected": false, "error": "..."}}

Not rate limited and not access-logged.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Response, status

from socialnet import __version__
from socialnet import database
from socialnet.schemas.common import DatabaseHealth, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    connected, error = await database.check_connection(database.engine)
    if not connected:
        logger.warning("Health check: database unreachable: %s", error)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="OK" if connected else "ERROR",
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=round(time.time() - _start_time, 2),
        version=__version__,
        database=DatabaseHealth(connected=connected, error=error),
    )
