"""
Vacancies Health Check Endpoints
Liveness and readiness probes for container orchestration and monitoring.
"""

import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from vacancies.api.deps import AsyncSessionDep
from vacancies.core.config import settings

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health status values for components and overall system."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status for an individual component."""

    status: HealthStatus
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class LivenessResponse(BaseModel):
    """Simple liveness check response."""

    status: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: HealthStatus
    timestamp: str
    version: str
    components: dict[str, ComponentHealth]


async def check_database(db: AsyncSession) -> ComponentHealth:
    """
    Check database connectivity.

    Runs a simple query and measures latency.
    """
    start_time = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
        latency = (time.perf_counter() - start_time) * 1000
        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            latency_ms=round(latency, 2),
            message="Database connection successful",
        )
    except Exception as e:
        latency = (time.perf_counter() - start_time) * 1000
        logger.error(f"Database health check failed: {e}")
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            latency_ms=round(latency, 2),
            message="Database connection failed",
        )


router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    response_model=LivenessResponse,
    summary="Basic liveness check",
    description="Simple health check that returns OK if the service is running.",
)
async def basic_health() -> LivenessResponse:
    return LivenessResponse(status="ok")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Returns 200 when the database is reachable, 503 otherwise.",
)
async def readiness_probe(db: AsyncSessionDep, response: Response) -> ReadinessResponse:
    database = await check_database(db)
    if database.status == HealthStatus.UNHEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status=database.status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        components={"database": database},
    )
