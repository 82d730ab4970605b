"""
Redis-backed key/value repository.

Holds three kinds of entries for the service:
- trends:{channels}:{limit} and trends:snapshot:{channels}, written with the
  response cache's fresh + stale window as TTL
- summary:{digest}, written with a 24h TTL
- settings:{userId}, written without expiry (ttl_seconds=0)

Values are JSON documents encoded as UTF-8 with CJK text left unescaped, so
entries stay readable from redis-cli.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from trend_hub.storage.interfaces import ConnectionError, StorageError

logger = logging.getLogger(__name__)


def encode_value(value: Any) -> bytes:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def decode_value(key: str, raw: bytes) -> Any:
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StorageError(f"Entry {key!r} is not valid JSON: {e}")


class RedisCacheRepository:
    """JSON values in Redis; every Redis failure surfaces as StorageError."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        default_ttl: int = 3600,
        socket_timeout: float = 2.0,
    ):
        self.url = f"redis://{host}:{port}/{db}"
        self.password = password
        self.default_ttl = default_ttl
        self.socket_timeout = socket_timeout
        self._client: Optional[aioredis.Redis] = None

    async def connect(self) -> None:
        """
        Open the connection pool and check the server answers PING.

        Raises:
            ConnectionError: If Redis is unreachable
        """
        if self._client is not None:
            return

        client = aioredis.from_url(
            self.url,
            password=self.password,
            socket_timeout=self.socket_timeout,
            socket_connect_timeout=self.socket_timeout,
        )
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            await client.aclose()
            raise ConnectionError(f"Redis at {self.url} is unreachable: {e}")

        self._client = client
        logger.info(f"Connected to Redis at {self.url}")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> aioredis.Redis:
        if self._client is None:
            raise StorageError("Redis repository used before connect()")
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        client = self._require_client()
        try:
            raw = await client.get(key)
        except RedisError as e:
            raise StorageError(f"GET {key} failed: {e}")
        return None if raw is None else decode_value(key, raw)

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """Store value; ttl_seconds=None uses the default TTL, 0 means no expiry."""
        client = self._require_client()
        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        data = encode_value(value)
        try:
            if ttl > 0:
                await client.setex(key, ttl, data)
            else:
                await client.set(key, data)
        except RedisError as e:
            raise StorageError(f"SET {key} failed: {e}")
        return True

    async def delete(self, key: str) -> bool:
        client = self._require_client()
        try:
            return await client.delete(key) > 0
        except RedisError as e:
            raise StorageError(f"DEL {key} failed: {e}")

    async def exists(self, key: str) -> bool:
        client = self._require_client()
        try:
            return await client.exists(key) > 0
        except RedisError as e:
            raise StorageError(f"EXISTS {key} failed: {e}")
