"""
Fetch orchestration for the aggregation pipeline.

One aggregation run fans out one adapter call per requested platform over a
shared upstream client, waits for all of them to settle, then merges:
flatten, stable sort by hotness, near-duplicate suppression, truncation.
"""

import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional, Sequence

from trend_hub.collectors import PlatformAdapter, UpstreamClient, build_adapters
from trend_hub.config import get_aggregation_config
from trend_hub.errors import AllSourcesEmptyError, InvalidChannelError
from trend_hub.observability.logging import log_context
from trend_hub.observability.metrics import (
    aggregation_counter,
    aggregation_duration,
    duplicates_dropped_counter,
    track_duration,
)
from trend_hub.processing.deduplicate import TitleDeduplicator
from trend_hub.types import TrendItem, TrendsPayload, now_ms

logger = logging.getLogger(__name__)


def parse_channels(raw: Optional[str]) -> Optional[List[str]]:
    """
    Split a comma-separated channel parameter.

    Returns:
        Stripped non-empty keys, or None when nothing was supplied
    """
    if not raw:
        return None
    channels = [part.strip() for part in raw.split(",") if part.strip()]
    return channels or None


def merge_ranked(results: Sequence[List[TrendItem]]) -> List[TrendItem]:
    """Flatten per-platform lists and sort by hot descending (stable)."""
    merged = [item for items in results for item in items]
    merged.sort(key=lambda item: item.hot, reverse=True)
    return merged


class TrendAggregator:
    """
    Multi-platform trend aggregation.

    Holds no per-request state; one instance serves all requests.
    """

    def __init__(
        self,
        adapters: Optional[Dict[str, PlatformAdapter]] = None,
        deduplicator: Optional[TitleDeduplicator] = None,
        client_factory: Callable[[], UpstreamClient] = UpstreamClient,
        default_limit: Optional[int] = None,
        max_limit: Optional[int] = None,
    ):
        config = get_aggregation_config()
        self.adapters = adapters if adapters is not None else build_adapters()
        self.deduplicator = deduplicator or TitleDeduplicator(config["dedup_threshold"])
        self.client_factory = client_factory
        self.default_limit = default_limit or config["default_limit"]
        self.max_limit = max_limit or config["max_limit"]

    @property
    def supported_channels(self) -> List[str]:
        return list(self.adapters.keys())

    def resolve_channels(self, channels: Optional[Sequence[str]]) -> List[str]:
        """
        Validate requested channel keys.

        Unknown keys are ignored and duplicates collapsed (first occurrence
        wins). No channels at all means every platform.

        Raises:
            InvalidChannelError: If channels were given but none is known
        """
        if not channels:
            return self.supported_channels

        resolved: List[str] = []
        for channel in channels:
            if channel in self.adapters and channel not in resolved:
                resolved.append(channel)

        if not resolved:
            raise InvalidChannelError(list(channels), self.supported_channels)
        return resolved

    def clamp_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.default_limit
        return min(self.max_limit, max(1, limit))

    async def _fetch_all(self, channels: List[str]) -> List[List[TrendItem]]:
        async with self.client_factory() as client:
            results = await asyncio.gather(
                *(self.adapters[channel].fetch(client) for channel in channels),
                return_exceptions=True,
            )

        settled: List[List[TrendItem]] = []
        for channel, result in zip(channels, results):
            if isinstance(result, BaseException):
                logger.error(f"{channel}: adapter raised {result!r}", exc_info=result)
                settled.append([])
            else:
                settled.append(result)
        return settled

    @track_duration(aggregation_duration)
    async def collect(self, channels: Optional[Sequence[str]] = None) -> TrendsPayload:
        """
        Run one aggregation without truncation.

        Args:
            channels: Requested platform keys (None for all)

        Returns:
            TrendsPayload with every deduplicated item, hot descending

        Raises:
            InvalidChannelError: If no requested channel is known
            AllSourcesEmptyError: If no source produced any item
        """
        resolved = self.resolve_channels(channels)

        with log_context(channels=",".join(resolved)):
            start_time = time.perf_counter()
            results = await self._fetch_all(resolved)

            merged = merge_ranked(results)
            deduplicated = self.deduplicator.dedupe(merged)
            duplicates_dropped_counter.inc(len(merged) - len(deduplicated))

            payload = TrendsPayload(items=deduplicated, timestamp=now_ms(), channels=resolved)

            counts = {channel: len(items) for channel, items in zip(resolved, results)}
            logger.info(
                f"Aggregated {len(deduplicated)} items from {counts} "
                f"({len(merged)} before dedup) in {time.perf_counter() - start_time:.2f}s"
            )

            if not payload.items:
                aggregation_counter.labels(result="empty").inc()
                raise AllSourcesEmptyError(resolved, payload.timestamp)

            aggregation_counter.labels(result="ok").inc()
            return payload

    def truncate(self, payload: TrendsPayload, limit: Optional[int] = None) -> TrendsPayload:
        """Top `limit` items of a collected payload (limit clamped)."""
        return payload.model_copy(update={"items": payload.items[: self.clamp_limit(limit)]})

    async def aggregate(
        self,
        channels: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> TrendsPayload:
        """
        Run one aggregation and keep the top `limit` items.

        Raises:
            InvalidChannelError: If no requested channel is known
            AllSourcesEmptyError: If no source produced any item
        """
        return self.truncate(await self.collect(channels), limit)
