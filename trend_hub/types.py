"""
Shared type definitions for the trend aggregation service.

These models are the contract between the source adapters, the aggregation
pipeline, the response cache and the HTTP API.
"""

import time
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field, NonNegativeFloat, NonNegativeInt


# ============================================================================
# Enums
# ============================================================================


class Platform(str, Enum):
    """Supported trend listing platforms."""

    WEIBO = "weibo"
    ZHIHU = "zhihu"
    BILIBILI = "bilibili"
    DOUYIN = "douyin"
    BAIDU = "baidu"
    TOUTIAO = "toutiao"
    DOUBAN = "douban"
    JUEJIN = "juejin"
    GITHUB = "github"
    V2EX = "v2ex"


class CacheStatus(str, Enum):
    """How a trends response was served."""

    HIT = "HIT"
    STALE = "STALE"
    MISS = "MISS"


# Hotness keeps the upstream integer/decimal distinction
Number = Union[int, float]


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


# ============================================================================
# Core Data Models
# ============================================================================


class PlatformConfig(BaseModel):
    """Static description of one upstream platform."""

    key: Platform
    endpoint: str  # DailyHotApi path, e.g. "/weibo"
    name: str  # Display name
    fallback: Optional[str] = None  # Registered public fallback, if any

    class Config:
        frozen = True


class TrendItem(BaseModel):
    """One normalized trending entry from one platform."""

    id: str
    title: str = Field(..., min_length=1)
    desc: str = ""
    url: str = "#"
    hot: Union[NonNegativeInt, NonNegativeFloat] = 0
    cover: Optional[str] = None
    source: Platform
    tag: Optional[str] = None
    timestamp: int = Field(default_factory=now_ms)

    class Config:
        use_enum_values = True


class TrendsPayload(BaseModel):
    """Successful aggregation result as served to clients."""

    items: List[TrendItem]
    timestamp: int
    channels: List[str]
