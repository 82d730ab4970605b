"""
Test fixtures and sample data for development and testing.

This module provides upstream payloads and pre-wired pipeline objects
for tests across all layers.
"""

from typing import Any, Dict, List, Optional

from tests.mocks.upstream import FakeUpstreamClient
from trend_hub.aggregator import TrendAggregator
from trend_hub.collectors import DailyHotStrategy, build_adapter
from trend_hub.config import PLATFORMS
from trend_hub.types import TrendItem

HOT_API_BASE = "https://hot.test"
BACKUP_HOT_API_BASE = "https://hot-backup.test"


# ============================================================================
# Titles
# ============================================================================


def unique_title(index: int) -> str:
    """
    A title sharing no characters with any other unique_title.

    Character-set Jaccard similarity between two such titles is 0, so they
    never collapse during deduplication.
    """
    start = 0x4E00 + index * 4
    return "".join(chr(code) for code in range(start, start + 4))


# ============================================================================
# Upstream payloads
# ============================================================================


def dailyhot_record(
    title: str,
    hot: Any = 1000,
    url: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """One record in the DailyHotApi item shape."""
    record = {
        "title": title,
        "hot": hot,
        "url": url if url is not None else f"https://example.test/item/{title}",
        "desc": f"{title} details",
    }
    record.update(extra)
    return record


def dailyhot_envelope(records: List[Dict[str, Any]], code: int = 200) -> Dict[str, Any]:
    """DailyHotApi response envelope."""
    return {"code": code, "name": "test", "total": len(records), "data": records}


def dailyhot_url(platform: str, base: str = HOT_API_BASE) -> str:
    return f"{base}{PLATFORMS[platform].endpoint}"


def ranked_records(count: int, hot_start: int, offset: int = 0) -> List[Dict[str, Any]]:
    """count records with distinct titles and strictly decreasing hot."""
    return [
        dailyhot_record(unique_title(offset + i), hot=hot_start - i * 10)
        for i in range(count)
    ]


# ============================================================================
# Pipeline wiring
# ============================================================================


def make_aggregator(
    responses: Dict[str, Any],
    platforms: Optional[List[str]] = None,
    bases: Optional[List[str]] = None,
):
    """
    Build an aggregator over a FakeUpstreamClient.

    Returns:
        Tuple of (aggregator, fake upstream client)
    """
    upstream = FakeUpstreamClient(responses)
    bases = bases or [HOT_API_BASE]
    platforms = platforms or list(PLATFORMS.keys())

    adapters = {
        key: build_adapter(PLATFORMS[key], max_items=20, primary=DailyHotStrategy(lambda: bases))
        for key in platforms
    }
    aggregator = TrendAggregator(
        adapters=adapters,
        client_factory=upstream,
        default_limit=100,
        max_limit=200,
    )
    return aggregator, upstream


def create_trend_item(
    title: str,
    hot: float = 100.0,
    source: str = "weibo",
    desc: str = "",
) -> TrendItem:
    """Create a sample normalized item."""
    return TrendItem(
        id=f"{source}_{abs(hash(title)):x}",
        title=title,
        desc=desc,
        url="https://example.test/item",
        hot=hot,
        source=source,
    )
