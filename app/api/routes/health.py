"""Health check endpoint with a time-bounded database ping."""

import asyncio
import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.api.limiter import limiter
from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse)
@limiter.exempt
async def get_health(
    response: Response,
    db: Session = Depends(get_db),
) -> HealthResponse:
    """
    Return service health and database connectivity (503 when the store is unreachable).
    Used by load balancers and monitoring.
    """
    try:
        connected = await asyncio.wait_for(
            run_in_threadpool(check_db_connected, db.get_bind()),
            timeout=settings.HEALTH_CHECK_TIMEOUT_SEC,
        )
    except asyncio.TimeoutError:
        logger.error(
            "Database health check timed out",
            extra={"timeout_sec": settings.HEALTH_CHECK_TIMEOUT_SEC},
        )
        connected = False

    if not connected:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        timestamp=datetime.now(UTC),
    )
