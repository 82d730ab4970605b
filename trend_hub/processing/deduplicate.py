"""
Near-duplicate suppression across platforms.

Titles are compared with a character-set Jaccard index: each title is
case-folded and treated as a set of characters. The metric ignores word
order and needs no tokenizer, which suits CJK headlines.
"""

import logging
from typing import List, Optional

from trend_hub.types import TrendItem

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.7


def title_similarity(a: Optional[str], b: Optional[str]) -> float:
    """
    Character-set Jaccard similarity of two titles.

    Returns:
        Intersection size over union size in [0, 1]; 0 when either title
        is empty
    """
    if not a or not b:
        return 0.0

    set_a = set(a.casefold())
    set_b = set(b.casefold())
    union = len(set_a | set_b)
    if union == 0:
        return 0.0
    return len(set_a & set_b) / union


class TitleDeduplicator:
    """
    Greedy single-pass deduplicator.

    Input must already be sorted by hotness descending: the first item of
    a near-duplicate group is the most popular and is the one kept.
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = threshold

    def is_duplicate(self, candidate: TrendItem, kept: List[TrendItem]) -> bool:
        return any(
            title_similarity(existing.title, candidate.title) > self.threshold
            for existing in kept
        )

    def dedupe(self, items: List[TrendItem]) -> List[TrendItem]:
        """
        Drop items whose title is too similar to a more popular kept item.

        Args:
            items: Items sorted by hot descending

        Returns:
            Kept items in input order
        """
        kept: List[TrendItem] = []

        for item in items:
            if item is None or not item.title:
                continue
            if not self.is_duplicate(item, kept):
                kept.append(item)

        logger.debug(
            f"Deduplicated {len(items)} items to {len(kept)} "
            f"(threshold={self.threshold})"
        )
        return kept
