"""
Platform adapters: one ordered fallback chain per platform.
"""

import logging
import time
from typing import Dict, List, Optional

from trend_hub.collectors.base import FetchStrategy, PublicFallbackStrategy
from trend_hub.collectors.client import UpstreamClient
from trend_hub.collectors.dailyhot import DailyHotStrategy
from trend_hub.collectors.registry import get_fallback
from trend_hub.config import PLATFORMS, get_aggregation_config
from trend_hub.observability.metrics import (
    items_collected_counter,
    upstream_request_counter,
    upstream_request_duration,
)
from trend_hub.types import PlatformConfig, TrendItem

logger = logging.getLogger(__name__)


class PlatformAdapter:
    """
    Fetches one platform's listing through its strategy chain.

    Strategies are tried in order until one yields items. fetch() never
    raises: any failure of a strategy is logged and treated as an empty
    result for that strategy.
    """

    def __init__(
        self,
        platform: PlatformConfig,
        strategies: List[FetchStrategy],
        max_items: int = 20,
    ):
        self.platform = platform
        self.strategies = strategies
        self.max_items = max_items

    @property
    def key(self) -> str:
        return self.platform.key.value

    async def fetch(self, client: UpstreamClient) -> List[TrendItem]:
        for strategy in self.strategies:
            start_time = time.perf_counter()
            try:
                items = await strategy.fetch(client, self.platform, self.max_items)
                outcome = "ok" if items else "empty"
            except Exception as e:
                logger.warning(
                    f"{self.key}: strategy {strategy.name} failed: {e}", exc_info=True
                )
                items = []
                outcome = "error"
            finally:
                upstream_request_duration.labels(strategy=strategy.name).observe(
                    time.perf_counter() - start_time
                )

            upstream_request_counter.labels(
                platform=self.key, strategy=strategy.name, outcome=outcome
            ).inc()

            if items:
                items_collected_counter.labels(platform=self.key).inc(len(items))
                logger.debug(f"{self.key}: {len(items)} items via {strategy.name}")
                return items

        logger.warning(f"{self.key}: all strategies returned nothing")
        return []

    def __repr__(self) -> str:
        return f"<PlatformAdapter ({self.key}: {[s.name for s in self.strategies]})>"


def build_adapter(
    platform: PlatformConfig,
    max_items: Optional[int] = None,
    primary: Optional[FetchStrategy] = None,
) -> PlatformAdapter:
    """Primary DailyHotApi strategy, then the platform's public fallback if any."""
    if max_items is None:
        max_items = get_aggregation_config()["max_items_per_platform"]

    strategies: List[FetchStrategy] = [primary or DailyHotStrategy()]

    if platform.fallback:
        source = get_fallback(platform.fallback)
        if source is not None:
            strategies.append(PublicFallbackStrategy(source))
        else:
            logger.warning(f"{platform.key.value}: fallback '{platform.fallback}' is not registered")

    return PlatformAdapter(platform, strategies, max_items=max_items)


def build_adapters(
    platforms: Optional[Dict[str, PlatformConfig]] = None,
    max_items: Optional[int] = None,
) -> Dict[str, PlatformAdapter]:
    """Build an adapter for every configured platform."""
    platforms = platforms if platforms is not None else PLATFORMS
    return {key: build_adapter(cfg, max_items=max_items) for key, cfg in platforms.items()}
