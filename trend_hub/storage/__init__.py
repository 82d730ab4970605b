"""
Storage layer: key/value repositories backing the response cache,
user settings and summaries.
"""

import logging
from typing import Optional

from trend_hub.storage.interfaces import (
    CacheRepository,
    ConnectionError,
    StorageError,
)
from trend_hub.storage.memory import InMemoryCacheRepository
from trend_hub.storage.redis import RedisCacheRepository

logger = logging.getLogger(__name__)


async def create_cache_repository(
    backend: str = "redis",
    host: str = "localhost",
    port: int = 6379,
    db: int = 0,
    password: Optional[str] = None,
) -> CacheRepository:
    """
    Create the configured key/value repository.

    Falls back to the in-memory repository when Redis is unreachable, so the
    service keeps working (without a shared cache) during a Redis outage.
    """
    if backend == "memory":
        logger.info("Using in-memory cache repository")
        return InMemoryCacheRepository()

    repository = RedisCacheRepository(host=host, port=port, db=db, password=password)
    try:
        await repository.connect()
        return repository
    except ConnectionError as e:
        logger.warning(f"Redis unavailable ({e}); falling back to in-memory cache")
        return InMemoryCacheRepository()


__all__ = [
    "CacheRepository",
    "StorageError",
    "ConnectionError",
    "InMemoryCacheRepository",
    "RedisCacheRepository",
    "create_cache_repository",
]
