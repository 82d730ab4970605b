"""
Trend endpoint: the aggregated, deduplicated multi-platform list.
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from api.dependencies import get_trend_service
from api.schemas.trends import TrendsResponse
from trend_hub.aggregator import parse_channels
from trend_hub.config import get_cache_config
from trend_hub.services import TrendService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trends", tags=["Trends"])

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_limit(raw: Optional[str]) -> Optional[int]:
    """
    Lenient limit parsing: the leading integer is used ("5.5" and "5abc"
    give 5). Anything without one means the default.
    """
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else None


def cache_control_header() -> str:
    config = get_cache_config()
    return (
        f"public, max-age={config['fresh_ttl_seconds']}, "
        f"stale-while-revalidate={config['stale_ttl_seconds']}"
    )


@router.get(
    "",
    response_model=TrendsResponse,
    status_code=status.HTTP_200_OK,
    summary="Aggregated trends",
    description="Merged, deduplicated trending list across the requested platforms.",
    responses={400: {"description": "No supported channel requested"}, 502: {"description": "No upstream returned data"}},
)
async def get_trends(
    response: Response,
    channels: Optional[str] = Query(None, description="Comma-separated platform keys"),
    limit: Optional[str] = Query(None, description="Maximum items (1-200, default 100)"),
    fresh: Optional[str] = Query(None, description="1 to bypass the cache"),
    service: TrendService = Depends(get_trend_service),
):
    """
    Get aggregated trends.

    Served from the response cache when possible; the X-Cache header reports
    HIT, STALE (served while a refresh runs) or MISS.

    Args:
        channels: Comma-separated platform keys; omitted means all
        limit: Maximum number of items
        fresh: "1" or "true" forces a new aggregation
        service: Trends service dependency

    Returns:
        TrendsResponse
    """
    force = (fresh or "").strip().lower() in ("1", "true", "yes")
    result = await service.get_trends(
        channels=parse_channels(channels),
        limit=parse_limit(limit),
        fresh=force,
    )

    response.headers["X-Cache"] = result.cache_status.value
    response.headers["Cache-Control"] = cache_control_header()
    return result.payload
