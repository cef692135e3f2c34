"""
Contact Inbox Health Check Endpoints
Liveness and readiness checks for process supervisors and load balancers.
"""

import time
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import structlog
from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel

from backend.core.config import settings
from backend.core.exceptions import StorageError
from backend.storage import SubmissionStore

logger = structlog.get_logger(__name__)


# =============================================================================
# Health Status Models
# =============================================================================


class HealthStatus(str, Enum):
    """Health status values for components and overall system."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status for an individual component."""

    status: HealthStatus
    backend: Optional[str] = None
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: HealthStatus
    timestamp: str
    version: str
    components: dict[str, ComponentHealth]


class LivenessResponse(BaseModel):
    """Simple liveness check response."""

    status: str


# =============================================================================
# Health Check Functions
# =============================================================================


async def check_storage(store: Optional[SubmissionStore]) -> ComponentHealth:
    """
    Ping the storage backend and measure latency.

    Failure details are logged, not returned.
    """
    if store is None:
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            message="Storage backend not initialized",
        )

    start_time = time.perf_counter()
    try:
        await store.ping()
    except StorageError as e:
        latency = (time.perf_counter() - start_time) * 1000
        logger.error("storage_health_check_failed", backend=store.name, error=str(e))
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            backend=store.name,
            latency_ms=round(latency, 2),
            message="Storage backend unreachable",
        )

    latency = (time.perf_counter() - start_time) * 1000
    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        backend=store.name,
        latency_ms=round(latency, 2),
        message="Storage connection successful",
    )


# =============================================================================
# Router Definition
# =============================================================================

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    response_model=LivenessResponse,
    summary="Basic liveness check",
)
async def basic_health() -> LivenessResponse:
    """Returns OK whenever the process is serving requests."""
    return LivenessResponse(status="ok")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    responses={503: {"description": "Storage backend unavailable"}},
)
async def readiness_check(request: Request, response: Response) -> ReadinessResponse:
    """
    Readiness check.

    Returns 200 when the storage backend answers, 503 otherwise.
    """
    storage = await check_storage(getattr(request.app.state, "store", None))
    if storage.status != HealthStatus.HEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status=storage.status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        components={"storage": storage},
    )
