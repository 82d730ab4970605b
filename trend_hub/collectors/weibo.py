"""
Weibo fallback: the hot-search side panel used by weibo.com itself.
"""

from trend_hub.collectors.base import FallbackSource, quote_component
from trend_hub.collectors.registry import register_fallback
from trend_hub.processing.normalize import FieldMap

WEIBO_HOT_SEARCH_URL = "https://weibo.com/ajax/side/hotSearch"


def search_url(record: dict, title: str) -> str:
    return f"https://s.weibo.com/weibo?q={quote_component(title)}"


register_fallback(
    FallbackSource(
        platform="weibo",
        url=WEIBO_HOT_SEARCH_URL,
        list_paths=("data.realtime",),
        fields=FieldMap(
            title=("word",),
            url=(),
            desc=("note",),
            hot=("num", "raw_hot", "hot"),
            cover=(),
            tag=("category",),
            url_builder=search_url,
        ),
        headers={"Referer": "https://weibo.com/"},
    )
)
