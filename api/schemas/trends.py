"""
Request and response schemas for trends, search and summary endpoints.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from trend_hub.types import TrendItem


class TrendsResponse(BaseModel):
    """Aggregated, deduplicated trend list."""

    items: List[TrendItem] = Field(..., description="Items sorted by hot descending")
    timestamp: int = Field(..., description="Aggregation time (epoch ms)")
    channels: List[str] = Field(..., description="Platforms included")

    class Config:
        json_schema_extra = {
            "example": {
                "items": [
                    {
                        "id": "weibo_1a2b3c4d",
                        "title": "台风登陆广东",
                        "desc": "",
                        "url": "https://s.weibo.com/weibo?q=%23台风登陆广东%23",
                        "hot": 1200000,
                        "cover": None,
                        "source": "weibo",
                        "tag": None,
                        "timestamp": 1705314600000,
                    }
                ],
                "timestamp": 1705314600000,
                "channels": ["weibo", "zhihu"],
            }
        }


class SearchRequest(BaseModel):
    """Search over a client-supplied item set."""

    q: Optional[str] = Field(None, description="Search keyword")
    items: List[Dict[str, Any]] = Field(default_factory=list, description="Items to search")


class SearchResponse(BaseModel):
    """Search results."""

    items: List[Dict[str, Any]] = Field(..., description="Matching items, best first")
    total: int = Field(..., ge=0, description="Number of matches before the cap")
    query: str = Field(..., description="Search keyword")
    timestamp: int = Field(..., description="Epoch milliseconds")
    message: Optional[str] = Field(None, description="Set when no data was available")


class SummaryRequest(BaseModel):
    """AI summary request. Presence of userId and title is checked by the service."""

    userId: Optional[str] = Field(None, description="Requesting user")
    title: Optional[str] = Field(None, description="Trend item title")
    content: Optional[str] = Field(None, description="Optional item description")


class SummaryResponse(BaseModel):
    """AI summary result."""

    summary: str = Field(..., description="Summary text")
    model: str = Field(..., description="Model used")
    timestamp: int = Field(..., description="Epoch milliseconds")
