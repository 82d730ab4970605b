"""
Primary strategy: DailyHotApi mirrors.

Every mirror exposes the same `{code, data: [...]}` envelope under the
platform's endpoint path. Mirrors are tried in configured order and the
first one yielding at least one usable item wins.
"""

import logging
from typing import Callable, List

from trend_hub.collectors.base import FetchStrategy, normalize_records
from trend_hub.collectors.client import UpstreamClient
from trend_hub.config import get_hot_api_bases
from trend_hub.processing.normalize import DAILY_HOT_FIELDS
from trend_hub.types import PlatformConfig, TrendItem

logger = logging.getLogger(__name__)

SUCCESS_CODE = 200


class DailyHotStrategy(FetchStrategy):
    """Query each DailyHotApi mirror until one returns items."""

    name = "dailyhot"

    def __init__(self, bases_provider: Callable[[], List[str]] = get_hot_api_bases):
        self._bases_provider = bases_provider

    async def fetch(
        self,
        client: UpstreamClient,
        platform: PlatformConfig,
        max_items: int,
    ) -> List[TrendItem]:
        for base in self._bases_provider():
            url = f"{base}{platform.endpoint}"
            data = await client.get_json(url)

            if not isinstance(data, dict):
                continue
            if data.get("code") != SUCCESS_CODE or not isinstance(data.get("data"), list):
                logger.warning(f"DailyHotApi {url} returned code={data.get('code')!r}")
                continue

            items = normalize_records(
                platform.key.value, data["data"], max_items, DAILY_HOT_FIELDS
            )
            if items:
                return items

            logger.info(f"DailyHotApi {url} returned no usable items")

        return []
