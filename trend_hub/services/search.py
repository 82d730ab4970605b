"""
Keyword search over an already aggregated item set.

Search never fetches upstream; it ranks whatever items it is given
(a cached snapshot or a client-supplied list).
"""

import logging
from typing import Any, Dict, Iterable, List, Tuple

from trend_hub.processing.normalize import to_number

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 50


def _field(item: Dict[str, Any], name: str) -> str:
    value = item.get(name)
    return str(value).casefold() if value else ""


def search_items(
    items: Iterable[Dict[str, Any]],
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> Tuple[List[Dict[str, Any]], int]:
    """
    Filter items by case-insensitive substring match on title or desc.

    Title matches rank before description-only matches; within each group
    items are ordered by hot descending.

    Args:
        items: Item dicts (TrendItem shape)
        query: Search keyword
        limit: Maximum number of results returned

    Returns:
        Tuple of (top results, total number of matches)
    """
    needle = query.strip().casefold()
    if not needle:
        return [], 0

    matches = []
    for item in items:
        if not isinstance(item, dict):
            continue
        in_title = needle in _field(item, "title")
        if in_title or needle in _field(item, "desc"):
            matches.append((in_title, item))

    matches.sort(key=lambda match: (not match[0], -to_number(match[1].get("hot"))))

    logger.debug(f"Search '{needle}' matched {len(matches)} items")
    return [item for _, item in matches[:limit]], len(matches)
