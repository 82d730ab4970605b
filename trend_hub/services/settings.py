"""
Per-user settings stored in a key/value repository.
"""

import logging
from typing import Any, Dict, Optional

from trend_hub.errors import MissingParametersError
from trend_hub.storage.interfaces import CacheRepository
from trend_hub.types import now_ms

logger = logging.getLogger(__name__)

API_KEY_FIELD = "qwenApiKey"
MASKED_VALUE = "******"


def settings_key(user_id: str) -> str:
    return f"settings:{user_id}"


class SettingsService:
    """Reads and merges user settings; never returns the raw API key."""

    def __init__(self, store: CacheRepository):
        self.store = store

    async def load(self, user_id: Optional[str]) -> Dict[str, Any]:
        """Raw settings for a user (empty when none are stored)."""
        if not user_id:
            raise MissingParametersError("Missing userId parameter")

        stored = await self.store.get(settings_key(user_id))
        return stored if isinstance(stored, dict) else {}

    async def get(self, user_id: Optional[str]) -> Dict[str, Any]:
        """Settings as exposed to clients, with the API key masked."""
        settings = await self.load(user_id)
        has_key = bool(settings.get(API_KEY_FIELD))
        return {
            **settings,
            API_KEY_FIELD: MASKED_VALUE if has_key else None,
            "hasApiKey": has_key,
        }

    async def save(self, user_id: Optional[str], updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge updates into the stored settings and stamp updatedAt.

        Returns:
            The merged settings as stored
        """
        existing = await self.load(user_id)
        merged = {**existing, **updates, "updatedAt": now_ms()}

        # ttl 0 stores without expiry
        await self.store.set(settings_key(user_id), merged, ttl_seconds=0)
        logger.info(f"Saved settings for user {user_id} ({len(updates)} fields)")
        return merged

    async def get_api_key(self, user_id: str) -> Optional[str]:
        settings = await self.load(user_id)
        return settings.get(API_KEY_FIELD) or None
