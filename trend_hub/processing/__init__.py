"""
Processing stages of the aggregation pipeline: normalization and
near-duplicate suppression.
"""

from trend_hub.processing.deduplicate import TitleDeduplicator, title_similarity
from trend_hub.processing.normalize import (
    DAILY_HOT_FIELDS,
    FieldMap,
    make_stable_id,
    normalize,
    to_number,
)

__all__ = [
    "TitleDeduplicator",
    "title_similarity",
    "DAILY_HOT_FIELDS",
    "FieldMap",
    "make_stable_id",
    "normalize",
    "to_number",
]
