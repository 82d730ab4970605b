"""
Fetch strategies for platform adapters.

A platform adapter is an ordered list of strategies sharing one signature.
The primary strategy queries the DailyHotApi mirrors; platform-specific
public endpoints serve as fallbacks and are described as data
(FallbackSource) rather than code.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from trend_hub.collectors.client import UpstreamClient
from trend_hub.processing.normalize import FieldMap, normalize, resolve_path
from trend_hub.types import PlatformConfig, TrendItem

logger = logging.getLogger(__name__)


class FetchStrategy(ABC):
    """One way of obtaining a platform's listing."""

    # Strategy label for logs and metrics
    name: str = "strategy"

    @abstractmethod
    async def fetch(
        self,
        client: UpstreamClient,
        platform: PlatformConfig,
        max_items: int,
    ) -> List[TrendItem]:
        """
        Fetch and normalize a platform listing.

        Returns:
            Normalized items, empty when the upstream had nothing usable
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} ({self.name})>"


def quote_component(text: str) -> str:
    """Percent-encode text for use as a single query-string value."""
    return quote(text, safe="!~*'()")


def normalize_records(
    platform: str,
    records: List[Any],
    max_items: int,
    fields: FieldMap,
) -> List[TrendItem]:
    """Normalize the first max_items records and drop title-less ones."""
    items = []
    for index, record in enumerate(records[:max_items]):
        item = normalize(platform, record, index, fields)
        if item is not None:
            items.append(item)
    return items


@dataclass(frozen=True)
class FallbackSource:
    """
    Declarative description of a public fallback endpoint.

    Attributes:
        platform: Platform key this source serves
        url: Listing endpoint
        list_paths: Candidate dotted paths to the record list, tried in order
        fields: Candidate field names inside each record
        headers: Extra request headers (most platforms require a Referer)
    """

    platform: str
    url: str
    list_paths: Tuple[str, ...]
    fields: FieldMap
    headers: Dict[str, str] = field(default_factory=dict)

    def extract_records(self, data: Any) -> Optional[List[Any]]:
        for path in self.list_paths:
            records = resolve_path(data, path)
            if isinstance(records, list):
                return records
        return None


class PublicFallbackStrategy(FetchStrategy):
    """Strategy backed by a FallbackSource description."""

    def __init__(self, source: FallbackSource):
        self.source = source
        self.name = f"fallback:{source.platform}"

    async def fetch(
        self,
        client: UpstreamClient,
        platform: PlatformConfig,
        max_items: int,
    ) -> List[TrendItem]:
        data = await client.get_json(self.source.url, headers=self.source.headers)
        if data is None:
            return []

        records = self.source.extract_records(data)
        if records is None:
            logger.warning(f"{self.name}: unexpected response shape from {self.source.url}")
            return []

        return normalize_records(platform.key.value, records, max_items, self.source.fields)
