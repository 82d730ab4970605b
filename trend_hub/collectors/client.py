"""
Shared HTTP client for upstream listing APIs.

One UpstreamClient (one aiohttp session) is opened per aggregation run and
shared by all concurrent adapter calls. Every request carries its own
timeout; failures are logged and reported as None so that callers can move
on to the next mirror or fallback.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from trend_hub.config import UPSTREAM_TIMEOUT_SECONDS, UPSTREAM_USER_AGENT

logger = logging.getLogger(__name__)


class UpstreamClient:
    """Thin aiohttp wrapper returning parsed JSON or None."""

    def __init__(
        self,
        timeout_seconds: float = UPSTREAM_TIMEOUT_SECONDS,
        user_agent: str = UPSTREAM_USER_AGENT,
    ):
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "UpstreamClient":
        self._session = aiohttp.ClientSession(
            headers={
                "Accept": "application/json,text/plain,*/*",
                "User-Agent": self.user_agent,
            }
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def get_json(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout_seconds: Optional[float] = None,
    ) -> Optional[Any]:
        """
        GET a JSON document.

        Args:
            url: Absolute URL
            headers: Extra request headers (e.g. Referer)
            timeout_seconds: Per-request deadline (defaults to the client's)

        Returns:
            Parsed JSON, or None on timeout, network error, non-2xx status
            or an unparseable body
        """
        if self._session is None:
            raise RuntimeError("UpstreamClient is not open. Use 'async with UpstreamClient()'.")

        timeout = aiohttp.ClientTimeout(total=timeout_seconds or self.timeout_seconds)

        try:
            async with self._session.get(url, headers=headers, timeout=timeout) as resp:
                if resp.status < 200 or resp.status >= 300:
                    logger.warning(f"Upstream {url} returned status {resp.status}")
                    return None
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    logger.warning(f"Upstream {url} returned malformed JSON: {e}")
                    return None

        except asyncio.TimeoutError:
            logger.warning(f"Upstream {url} timed out after {timeout.total}s")
            return None
        except aiohttp.ClientError as e:
            logger.warning(f"Upstream {url} request failed: {e}")
            return None
