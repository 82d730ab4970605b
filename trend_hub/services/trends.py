"""
Trends service: response cache in front of the aggregator.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Set

from trend_hub.aggregator import TrendAggregator
from trend_hub.cache import ResponseCache
from trend_hub.errors import TrendHubError
from trend_hub.types import CacheStatus

logger = logging.getLogger(__name__)


@dataclass
class TrendsResult:
    """Payload plus how it was obtained."""

    payload: Dict[str, Any]
    cache_status: CacheStatus


class TrendService:
    """
    Serves aggregated trends with stale-while-revalidate caching.

    Fresh entries are returned directly. Stale entries are returned while
    a single background refresh per key recomputes them. Misses, and
    requests with fresh=True, aggregate synchronously and write back.
    """

    def __init__(self, aggregator: TrendAggregator, cache: ResponseCache):
        self.aggregator = aggregator
        self.cache = cache
        self._refreshing: Dict[str, asyncio.Task] = {}
        self._background: Set[asyncio.Task] = set()

    async def get_trends(
        self,
        channels: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
        fresh: bool = False,
    ) -> TrendsResult:
        """
        Get aggregated trends for a channel set.

        Args:
            channels: Requested platform keys (None for all)
            limit: Requested item count (clamped)
            fresh: Bypass the cache read (the result is still written back)

        Raises:
            InvalidChannelError: If no requested channel is known; checked
                before the cache so invalid requests never touch upstream
            AllSourcesEmptyError: If aggregation produced nothing
        """
        resolved = self.aggregator.resolve_channels(channels)
        limit = self.aggregator.clamp_limit(limit)
        key = self.cache.make_key(resolved, limit)

        if not fresh:
            cached = await self.cache.get(key)
            if cached is not None:
                if cached.stale:
                    self._schedule_refresh(key, resolved, limit)
                    return TrendsResult(cached.payload, CacheStatus.STALE)
                return TrendsResult(cached.payload, CacheStatus.HIT)

        payload = await self.refresh(resolved, limit, key)
        return TrendsResult(payload, CacheStatus.MISS)

    async def refresh(self, channels: List[str], limit: int, key: Optional[str] = None) -> Dict[str, Any]:
        """
        Aggregate now and write the result to the cache.

        The search snapshot gets the untruncated item list; the response
        entry gets the top `limit` items.
        """
        collected = await self.aggregator.collect(channels)
        payload = self.aggregator.truncate(collected, limit).model_dump(mode="json")

        await self.cache.put(key or self.cache.make_key(channels, limit), payload)
        await self.cache.put_snapshot(channels, collected.model_dump(mode="json"))
        return payload

    def _schedule_refresh(self, key: str, channels: List[str], limit: int) -> None:
        if key in self._refreshing:
            return

        task = asyncio.create_task(self._background_refresh(key, channels, limit))
        self._refreshing[key] = task
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _background_refresh(self, key: str, channels: List[str], limit: int) -> None:
        try:
            await self.refresh(channels, limit, key)
            logger.info(f"Revalidated stale cache entry {key}")
        except TrendHubError as e:
            logger.warning(f"Background refresh of {key} failed: {e}")
        except Exception as e:
            logger.error(f"Background refresh of {key} crashed: {e}", exc_info=True)
        finally:
            self._refreshing.pop(key, None)

    async def latest_snapshot(self, channels: Optional[Sequence[str]] = None) -> Optional[Dict[str, Any]]:
        """Most recently aggregated payload for a channel set, if cached."""
        resolved = self.aggregator.resolve_channels(channels)
        return await self.cache.get_snapshot(resolved)

    async def wait_for_refreshes(self) -> None:
        """Wait for in-flight background refreshes."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def close(self) -> None:
        """Cancel in-flight background refreshes."""
        for task in list(self._background):
            task.cancel()
        await self.wait_for_refreshes()
