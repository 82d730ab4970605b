"""
Storage layer interface contracts.

The key/value store is an external collaborator shared by the response
cache, the settings service and the summary cache. Values are JSON-native
Python objects (dicts, lists, strings, numbers).
"""

from typing import Any, Optional, Protocol


class CacheRepository(Protocol):
    """Interface for key/value caching operations."""

    async def get(self, key: str) -> Optional[Any]:
        """
        Get a value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value if found, None otherwise
        """
        ...

    async def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: Optional[int] = None,
    ) -> bool:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl_seconds: Time-to-live in seconds (None = default, 0 = no expiry)

        Returns:
            True if successful
        """
        ...

    async def delete(self, key: str) -> bool:
        """Delete a key from cache."""
        ...

    async def exists(self, key: str) -> bool:
        """Check if a key exists in cache."""
        ...

    async def close(self) -> None:
        """Release connections held by the repository."""
        ...


# ============================================================================
# Exceptions
# ============================================================================


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class ConnectionError(StorageError):
    """Exception for connection failures."""

    pass
