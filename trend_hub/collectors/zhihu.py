"""
Zhihu fallback: the v3 hot-list feed.

Records wrap the question in a `target` object; the question id gives the
canonical url.
"""

from trend_hub.collectors.base import FallbackSource
from trend_hub.collectors.registry import register_fallback
from trend_hub.processing.normalize import FieldMap, resolve_path

ZHIHU_HOT_LIST_URL = (
    "https://www.zhihu.com/api/v3/feed/topstory/hot-lists/total?limit=50&desktop=true"
)
ZHIHU_HOT_PAGE = "https://www.zhihu.com/hot"


def question_url(record: dict, title: str) -> str:
    question_id = resolve_path(record, "target.id")
    if question_id:
        return f"https://www.zhihu.com/question/{question_id}"
    return resolve_path(record, "target.url") or ZHIHU_HOT_PAGE


register_fallback(
    FallbackSource(
        platform="zhihu",
        url=ZHIHU_HOT_LIST_URL,
        list_paths=("data",),
        fields=FieldMap(
            title=("target.title", "target.title_area.title"),
            url=(),
            desc=("target.excerpt",),
            hot=("detail_text", "detailText", "score"),
            cover=("target.image_area.url", "target.thumbnail"),
            tag=(),
            url_builder=question_url,
        ),
        headers={"Referer": "https://www.zhihu.com/hot"},
    )
)
