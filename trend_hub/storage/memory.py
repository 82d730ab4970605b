"""
In-process cache repository.

Used when no Redis is configured or reachable. Entries expire lazily on
read, measured with a monotonic clock.
"""

import copy
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class InMemoryCacheRepository:
    """Dictionary-backed CacheRepository with TTL support."""

    def __init__(
        self,
        default_ttl: int = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        # key -> (value, expires_at or None)
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}

    def _live_entry(self, key: str) -> Optional[Tuple[Any, Optional[float]]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> Optional[Any]:
        entry = self._live_entry(key)
        if entry is None:
            logger.debug(f"Cache miss: {key}")
            return None
        # stored values are copied on write and read
        return copy.deepcopy(entry[0])

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        expires_at = self._clock() + ttl if ttl > 0 else None
        self._entries[key] = (copy.deepcopy(value), expires_at)
        return True

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def close(self) -> None:
        self._entries.clear()
