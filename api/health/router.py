"""
Liveness/readiness endpoints. Not behind the API key.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Response, status

from core import db

from . import schemas

router = APIRouter()

_STARTED_AT = time.monotonic()


@router.get("/health", response_model=schemas.HealthResponse)
def health() -> schemas.HealthResponse:
    return schemas.HealthResponse(
        uptime=round(time.monotonic() - _STARTED_AT, 3),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/health/ready", response_model=schemas.ReadinessResponse)
async def readiness(response: Response) -> schemas.ReadinessResponse:
    """
    Readiness probe: checks DB connectivity.
    """
    if await db.ping():
        return schemas.ReadinessResponse(status="ok", database="up")
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return schemas.ReadinessResponse(status="degraded", database="down")
