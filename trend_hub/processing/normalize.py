"""
Normalization of raw upstream records into TrendItem objects.

Upstream schemas drift between platforms and revisions, so every field is
read through an ordered list of candidate names (a FieldMap). Dotted names
address nested values, e.g. "target.title" or "stat.view".
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

from trend_hub.types import Number, TrendItem

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[,_\s]")
_NUMBER = re.compile(r"\d+(?:\.\d+)?")

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619

# Builds a url from the raw record and its title when no candidate matched
UrlBuilder = Callable[[dict, str], Optional[str]]


@dataclass(frozen=True)
class FieldMap:
    """Ordered candidate field names for each TrendItem attribute."""

    title: Tuple[str, ...] = ("title",)
    url: Tuple[str, ...] = ("url", "mobileUrl")
    desc: Tuple[str, ...] = ("desc", "description")
    hot: Tuple[str, ...] = ("hot", "hotValue")
    cover: Tuple[str, ...] = ("pic", "cover")
    tag: Tuple[str, ...] = ("label",)
    url_builder: Optional[UrlBuilder] = None


# DailyHotApi item shape
DAILY_HOT_FIELDS = FieldMap()


def resolve_path(record: Any, path: str) -> Any:
    """
    Read a dotted path from nested dicts/lists.

    Returns None as soon as a segment is missing or the container type
    does not match.
    """
    current = record
    for segment in path.split("."):
        if isinstance(current, dict):
            current = current.get(segment)
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def pick(record: Any, candidates: Sequence[str]) -> Any:
    """Return the first truthy value among the candidate paths, else None."""
    for path in candidates:
        value = resolve_path(record, path)
        if value:
            return value
    return None


def _bounded(number: Number) -> Number:
    # ints must still fit in a JSON double
    try:
        if not math.isfinite(number):
            return 0
    except OverflowError:
        return 0
    return max(number, 0)


def to_number(value: Any) -> Number:
    """
    Coerce an upstream hotness value to a non-negative number.

    Ints stay ints and floats stay floats. Negatives clamp to 0, as do
    values outside the float range. Strings have thousands separators and
    whitespace stripped and the first integer or decimal substring is used,
    so "1,234 万热度" becomes 1234. Anything else is 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return _bounded(value)
    if isinstance(value, str):
        match = _NUMBER.search(_SEPARATORS.sub("", value))
        if not match:
            return 0
        text = match.group(0)
        return _bounded(float(text) if "." in text else int(text))
    return 0


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a over the UTF-16 code units of text."""
    data = text.encode("utf-16-le")
    h = FNV_OFFSET_BASIS
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * FNV_PRIME) & 0xFFFFFFFF
    return h


def make_stable_id(platform: str, title: str, url: str) -> str:
    """Deterministic item id derived from (platform, title, url)."""
    return f"{platform}_{fnv1a_32(f'{title}#{url}'):x}"


def _as_text(value: Any) -> str:
    return str(value).strip() if value else ""


def normalize(
    source: str,
    raw: Any,
    index: int,
    fields: FieldMap = DAILY_HOT_FIELDS,
) -> Optional[TrendItem]:
    """
    Map one raw upstream record to a TrendItem.

    Args:
        source: Platform key
        raw: Raw upstream record
        index: Position of the record in the upstream list, used as the
            identity fallback when the record has no url
        fields: Candidate field names for this upstream shape

    Returns:
        TrendItem, or None when the record has no usable title
    """
    if not isinstance(raw, dict):
        return None

    title = _as_text(pick(raw, fields.title))
    if not title:
        return None

    url = _as_text(pick(raw, fields.url))
    if not url and fields.url_builder is not None:
        url = _as_text(fields.url_builder(raw, title))

    cover = pick(raw, fields.cover)
    tag = pick(raw, fields.tag)

    return TrendItem(
        id=make_stable_id(source, title, url or f"{source}_{index}"),
        title=title,
        desc=_as_text(pick(raw, fields.desc)),
        url=url or "#",
        hot=to_number(pick(raw, fields.hot)),
        cover=str(cover) if cover else None,
        source=source,
        tag=str(tag) if tag else None,
    )
