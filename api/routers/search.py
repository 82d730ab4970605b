"""
Search endpoints.

Search never triggers an upstream fetch: GET searches the most recent
aggregation snapshot for the channel set, POST searches items the client
already holds.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_trend_service
from api.schemas.trends import SearchRequest, SearchResponse
from trend_hub.aggregator import parse_channels
from trend_hub.services import DEFAULT_SEARCH_LIMIT, TrendService, search_items
from trend_hub.types import now_ms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["Search"])

NO_DATA_MESSAGE = "No cached trends yet; load /api/trends first"


def _require_query(q: Optional[str]) -> str:
    if not q or not q.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing search keyword q",
        )
    return q.strip()


@router.get(
    "",
    response_model=SearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Search cached trends",
)
async def search_cached(
    q: Optional[str] = Query(None, description="Search keyword"),
    channels: Optional[str] = Query(None, description="Comma-separated platform keys"),
    service: TrendService = Depends(get_trend_service),
) -> SearchResponse:
    """
    Search the latest aggregated snapshot for a channel set.

    Title matches rank first, then hotness; at most 50 results.
    """
    query = _require_query(q)

    snapshot = await service.latest_snapshot(parse_channels(channels))
    if snapshot is None:
        return SearchResponse(
            items=[], total=0, query=query, timestamp=now_ms(), message=NO_DATA_MESSAGE
        )

    results, total = search_items(snapshot.get("items", []), query, DEFAULT_SEARCH_LIMIT)
    return SearchResponse(items=results, total=total, query=query, timestamp=now_ms())


@router.post(
    "",
    response_model=SearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Search supplied items",
)
async def search_supplied(request: SearchRequest) -> SearchResponse:
    """Rank a client-supplied item set with the same rules as GET."""
    query = _require_query(request.q)
    results, total = search_items(request.items, query, DEFAULT_SEARCH_LIMIT)
    return SearchResponse(items=results, total=total, query=query, timestamp=now_ms())
