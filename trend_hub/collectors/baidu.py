"""
Baidu fallback: the realtime board.

The board has shipped both `data.cards[0].content` and a flat
`data.content`; both are accepted.
"""

from trend_hub.collectors.base import FallbackSource, quote_component
from trend_hub.collectors.registry import register_fallback
from trend_hub.processing.normalize import FieldMap

BAIDU_BOARD_URL = "https://top.baidu.com/api/board?platform=wise&tab=realtime"


def search_url(record: dict, title: str) -> str:
    return f"https://www.baidu.com/s?wd={quote_component(title)}"


register_fallback(
    FallbackSource(
        platform="baidu",
        url=BAIDU_BOARD_URL,
        list_paths=("data.cards.0.content", "data.content"),
        fields=FieldMap(
            title=("word", "query"),
            url=("rawUrl", "url"),
            desc=("desc", "desc2"),
            hot=("hotScore", "hot_score", "hot", "value"),
            cover=("img", "imgUrl"),
            tag=(),
            url_builder=search_url,
        ),
        headers={"Referer": "https://top.baidu.com/"},
    )
)
