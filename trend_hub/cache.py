"""
Short-TTL response cache for aggregated trends.

Entries are keyed by the sorted, de-duplicated channel set plus the limit,
so requests that differ only in channel order share an entry. Each entry
records when it was stored; within the fresh window it is served as is,
within the following stale window it is served while a refresh runs, and
after that the store has expired it.

The cache is an optimization only: every repository error is logged and
reported as a miss (or a skipped write).
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from trend_hub.config import get_cache_config
from trend_hub.observability.metrics import cache_lookup_counter
from trend_hub.storage.interfaces import CacheRepository, StorageError

logger = logging.getLogger(__name__)


@dataclass
class CachedResponse:
    """A cache hit."""

    payload: Dict[str, Any]
    age_seconds: float
    stale: bool


def channel_set_key(channels: Iterable[str]) -> str:
    return ",".join(sorted(set(channels)))


class ResponseCache:
    """Stale-while-revalidate cache over a CacheRepository."""

    def __init__(
        self,
        repository: Optional[CacheRepository],
        fresh_ttl: Optional[int] = None,
        stale_ttl: Optional[int] = None,
        prefix: str = "trends",
        clock: Callable[[], float] = time.time,
    ):
        config = get_cache_config()
        self.repository = repository
        self.fresh_ttl = fresh_ttl if fresh_ttl is not None else config["fresh_ttl_seconds"]
        self.stale_ttl = stale_ttl if stale_ttl is not None else config["stale_ttl_seconds"]
        self.prefix = prefix
        self._clock = clock

    @property
    def total_ttl(self) -> int:
        return self.fresh_ttl + self.stale_ttl

    def make_key(self, channels: Iterable[str], limit: int) -> str:
        return f"{self.prefix}:{channel_set_key(channels)}:{limit}"

    def snapshot_key(self, channels: Iterable[str]) -> str:
        return f"{self.prefix}:snapshot:{channel_set_key(channels)}"

    async def get(self, key: str) -> Optional[CachedResponse]:
        """
        Look up a cached payload.

        Returns:
            CachedResponse (stale=True inside the stale window), or None on
            miss, expiry or repository failure
        """
        if self.repository is None:
            return None

        try:
            entry = await self.repository.get(key)
        except StorageError as e:
            logger.warning(f"Cache read error for {key}: {e}")
            cache_lookup_counter.labels(result="error").inc()
            return None

        if not isinstance(entry, dict) or "payload" not in entry:
            cache_lookup_counter.labels(result="miss").inc()
            return None

        age = max(0.0, self._clock() - float(entry.get("stored_at", 0)))
        if age >= self.total_ttl:
            cache_lookup_counter.labels(result="miss").inc()
            return None

        stale = age >= self.fresh_ttl
        cache_lookup_counter.labels(result="stale" if stale else "hit").inc()
        logger.debug(f"Cache {'STALE' if stale else 'HIT'}: {key} (age={age:.1f}s)")
        return CachedResponse(payload=entry["payload"], age_seconds=age, stale=stale)

    async def put(self, key: str, payload: Dict[str, Any]) -> bool:
        """Store a payload for the fresh + stale window. Last writer wins."""
        if self.repository is None:
            return False

        entry = {"stored_at": self._clock(), "payload": payload}
        try:
            await self.repository.set(key, entry, ttl_seconds=self.total_ttl)
            return True
        except StorageError as e:
            logger.warning(f"Cache write error for {key}: {e}")
            return False

    async def get_snapshot(self, channels: Iterable[str]) -> Optional[Dict[str, Any]]:
        """Latest payload aggregated for a channel set, regardless of limit."""
        cached = await self.get(self.snapshot_key(channels))
        return cached.payload if cached else None

    async def put_snapshot(self, channels: Iterable[str], payload: Dict[str, Any]) -> bool:
        return await self.put(self.snapshot_key(channels), payload)
