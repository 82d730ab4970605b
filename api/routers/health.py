"""
Health check endpoint.
"""

from fastapi import APIRouter, status

from api import __version__
from api.schemas.common import HealthResponse
from trend_hub.types import now_ms

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Always returns 200 OK while the API process is running.",
)
async def health_check() -> HealthResponse:
    """
    Liveness probe.

    Does not check upstreams or the cache store, so it is suitable for
    load balancer health checks.
    """
    return HealthResponse(status="ok", timestamp=now_ms(), version=__version__)
