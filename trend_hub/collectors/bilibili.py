"""
Bilibili fallback: the web "popular" list.
"""

from typing import Optional

from trend_hub.collectors.base import FallbackSource
from trend_hub.collectors.registry import register_fallback
from trend_hub.processing.normalize import FieldMap

BILIBILI_POPULAR_URL = "https://api.bilibili.com/x/web-interface/popular?pn=1&ps=20"


def video_url(record: dict, title: str) -> Optional[str]:
    bvid = record.get("bvid")
    return f"https://www.bilibili.com/video/{bvid}" if bvid else None


register_fallback(
    FallbackSource(
        platform="bilibili",
        url=BILIBILI_POPULAR_URL,
        list_paths=("data.list",),
        fields=FieldMap(
            title=("title",),
            url=("short_link_v2", "short_link"),
            desc=("rcmd_reason.content", "desc"),
            hot=("stat.view", "stat.like"),
            cover=("pic",),
            tag=(),
            url_builder=video_url,
        ),
        headers={"Referer": "https://www.bilibili.com/"},
    )
)
