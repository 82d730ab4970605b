"""
Source adapters for upstream trend listings.

Usage:
    from trend_hub.collectors import UpstreamClient, build_adapters

    adapters = build_adapters()
    async with UpstreamClient() as client:
        items = await adapters["weibo"].fetch(client)
"""

from trend_hub.collectors.registry import (
    auto_discover_fallbacks,
    get_fallback,
    list_fallback_names,
    register_fallback,
)

# Auto-discover fallback sources when this package is imported
auto_discover_fallbacks()

from trend_hub.collectors.adapter import PlatformAdapter, build_adapter, build_adapters  # noqa: E402
from trend_hub.collectors.base import FallbackSource, FetchStrategy, PublicFallbackStrategy  # noqa: E402
from trend_hub.collectors.client import UpstreamClient  # noqa: E402
from trend_hub.collectors.dailyhot import DailyHotStrategy  # noqa: E402

__all__ = [
    "PlatformAdapter",
    "build_adapter",
    "build_adapters",
    "FallbackSource",
    "FetchStrategy",
    "PublicFallbackStrategy",
    "DailyHotStrategy",
    "UpstreamClient",
    "register_fallback",
    "get_fallback",
    "list_fallback_names",
]
