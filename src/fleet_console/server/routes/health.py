"""Health, readiness and liveness probes of the reference backend."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from fleet_console.server.dependencies import DbSession
from fleet_console.server.models import Car
from fleet_console.server.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession) -> HealthResponse:
    """Report API status; a failing database degrades rather than errors."""
    try:
        await db.execute(text("SELECT 1"))
        database = "healthy"
    except SQLAlchemyError:
        logger.exception("Database ping failed")
        database = "unhealthy"

    return HealthResponse(
        status="healthy" if database == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        database=database,
    )


@router.get("/ready")
async def readiness_check(db: DbSession) -> dict[str, str]:
    # Ready once the schema exists, seeded or not
    try:
        await db.scalar(select(func.count()).select_from(Car))
    except SQLAlchemyError:
        logger.warning("Readiness probe: schema not available")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database schema not ready",
        )
    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
