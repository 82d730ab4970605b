"""
Tests for the aggregation pipeline: fan-out, merge, deduplication and
truncation.

Run with: pytest tests/test_aggregator.py -v
"""

import itertools
from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.fixtures import (
    create_trend_item,
    dailyhot_envelope,
    dailyhot_record,
    dailyhot_url,
    make_aggregator,
    ranked_records,
)
from trend_hub.aggregator import TrendAggregator, merge_ranked, parse_channels
from trend_hub.errors import AllSourcesEmptyError, InvalidChannelError
from trend_hub.processing.deduplicate import title_similarity
from tests.mocks.upstream import FakeUpstreamClient


# ============================================================================
# Helpers
# ============================================================================


class TestParseChannels:
    """Tests for the channels query parameter."""

    def test_splits_and_strips(self):
        assert parse_channels(" weibo, ,zhihu ") == ["weibo", "zhihu"]

    @pytest.mark.parametrize("raw", [None, "", " , ,"])
    def test_empty_means_none(self, raw):
        assert parse_channels(raw) is None


class TestMergeRanked:
    """Tests for flatten and sort."""

    def test_sorted_by_hot_descending(self):
        merged = merge_ranked([
            [create_trend_item("a", hot=5), create_trend_item("b", hot=50)],
            [create_trend_item("c", hot=20, source="zhihu")],
        ])
        assert [item.hot for item in merged] == [50, 20, 5]

    def test_ties_keep_input_order(self):
        first = create_trend_item("first", hot=10, source="weibo")
        second = create_trend_item("second", hot=10, source="zhihu")
        assert merge_ranked([[first], [second]]) == [first, second]


# ============================================================================
# Channel and limit resolution
# ============================================================================


class TestResolution:
    """Tests for channel validation and limit clamping."""

    def test_no_channels_means_all(self):
        aggregator, _ = make_aggregator({})
        assert aggregator.resolve_channels(None) == aggregator.supported_channels
        assert len(aggregator.supported_channels) == 10

    def test_unknown_channels_are_ignored(self):
        aggregator, _ = make_aggregator({})
        assert aggregator.resolve_channels(["foo", "zhihu", "weibo", "zhihu"]) == ["zhihu", "weibo"]

    def test_only_unknown_channels_is_an_error(self):
        aggregator, _ = make_aggregator({})
        with pytest.raises(InvalidChannelError) as exc_info:
            aggregator.resolve_channels(["foo", "bar"])

        assert exc_info.value.requested == ["foo", "bar"]
        assert "weibo" in exc_info.value.supported

    @pytest.mark.parametrize("limit,expected", [(None, 100), (0, 1), (-3, 1), (5, 5), (200, 200), (500, 200)])
    def test_limit_clamping(self, limit, expected):
        aggregator, _ = make_aggregator({})
        assert aggregator.clamp_limit(limit) == expected


# ============================================================================
# Aggregation
# ============================================================================


class TestAggregate:
    """End-to-end aggregation over fake upstreams."""

    @pytest.mark.asyncio
    async def test_cross_platform_duplicate_keeps_hottest(self):
        aggregator, _ = make_aggregator({
            dailyhot_url("weibo"): dailyhot_envelope([dailyhot_record("台风登陆广东", hot=900000)]),
            dailyhot_url("zhihu"): dailyhot_envelope([dailyhot_record("台风登陆广东", hot=120000)]),
        }, platforms=["weibo", "zhihu"])

        payload = await aggregator.aggregate(["weibo", "zhihu"])

        assert len(payload.items) == 1
        assert payload.items[0].source == "weibo"
        assert payload.items[0].title == "台风登陆广东"
        assert payload.channels == ["weibo", "zhihu"]

    @pytest.mark.asyncio
    async def test_invalid_channels_make_no_upstream_calls(self):
        aggregator, upstream = make_aggregator({})

        with pytest.raises(InvalidChannelError):
            await aggregator.aggregate(["foo", "bar"])

        assert upstream.calls == []
        assert upstream.sessions_opened == 0

    @pytest.mark.asyncio
    async def test_all_sources_failing_is_an_error(self):
        aggregator, upstream = make_aggregator({
            dailyhot_url("weibo"): TimeoutError("timed out"),
            dailyhot_url("zhihu"): TimeoutError("timed out"),
        }, platforms=["weibo", "zhihu"])

        with pytest.raises(AllSourcesEmptyError) as exc_info:
            await aggregator.aggregate()

        assert exc_info.value.channels == ["weibo", "zhihu"]
        assert exc_info.value.timestamp > 0
        assert "HOT_API_BASES" in str(exc_info.value)
        # Both platforms went through mirror and public fallback
        assert len(upstream.calls) == 4

    @pytest.mark.asyncio
    async def test_limit_returns_hottest_items(self):
        aggregator, _ = make_aggregator({
            dailyhot_url("weibo"): dailyhot_envelope(ranked_records(20, 10000, offset=0)),
            dailyhot_url("zhihu"): dailyhot_envelope(ranked_records(20, 9995, offset=20)),
            dailyhot_url("bilibili"): dailyhot_envelope(ranked_records(10, 9993, offset=40)),
        }, platforms=["weibo", "zhihu", "bilibili"])

        full = await aggregator.aggregate(limit=200)
        top = await aggregator.aggregate(limit=5)

        assert len(full.items) == 50
        assert len(top.items) == 5
        assert [item.id for item in top.items] == [item.id for item in full.items[:5]]
        assert [item.hot for item in top.items] == [10000, 9995, 9993, 9990, 9985]

    @pytest.mark.asyncio
    async def test_collect_keeps_everything_truncate_clamps(self):
        aggregator, _ = make_aggregator({
            dailyhot_url("weibo"): dailyhot_envelope(ranked_records(8, 800)),
        }, platforms=["weibo"])

        collected = await aggregator.collect()

        assert len(collected.items) == 8
        assert len(aggregator.truncate(collected, 3).items) == 3
        assert len(aggregator.truncate(collected, 0).items) == 1
        assert len(collected.items) == 8

    @pytest.mark.asyncio
    async def test_output_sorted_and_deduplicated(self):
        aggregator, _ = make_aggregator({
            dailyhot_url("weibo"): dailyhot_envelope([
                dailyhot_record("今日热搜第一", hot=50),
                dailyhot_record("天气预报更新了", hot=500),
            ]),
            dailyhot_url("zhihu"): dailyhot_envelope([
                dailyhot_record("热搜第一今日", hot=300),
                dailyhot_record("程序员节", hot=80),
            ]),
            dailyhot_url("baidu"): dailyhot_envelope([
                dailyhot_record("天气预报更新", hot=700),
            ]),
        }, platforms=["weibo", "zhihu", "baidu"])

        payload = await aggregator.aggregate()
        hots = [item.hot for item in payload.items]

        assert hots == sorted(hots, reverse=True)
        for left, right in itertools.combinations(payload.items, 2):
            assert title_similarity(left.title, right.title) <= 0.7
        assert {item.title for item in payload.items} == {"天气预报更新", "热搜第一今日", "程序员节"}

    @pytest.mark.asyncio
    async def test_identical_upstreams_give_identical_items(self):
        responses = {
            dailyhot_url("weibo"): dailyhot_envelope(ranked_records(8, 800)),
            dailyhot_url("zhihu"): dailyhot_envelope(ranked_records(8, 805, offset=8)),
        }
        aggregator, _ = make_aggregator(responses, platforms=["weibo", "zhihu"])

        first = await aggregator.aggregate()
        second = await aggregator.aggregate()

        def strip(payload):
            return [item.model_dump(exclude={"timestamp"}) for item in payload.items]

        assert strip(first) == strip(second)

    @pytest.mark.asyncio
    async def test_one_failing_platform_does_not_fail_the_run(self):
        aggregator, _ = make_aggregator({
            dailyhot_url("weibo"): dailyhot_envelope(ranked_records(3, 30)),
            dailyhot_url("douyin"): ConnectionResetError("reset"),
        }, platforms=["weibo", "douyin"])

        payload = await aggregator.aggregate()

        assert len(payload.items) == 3
        assert {item.source for item in payload.items} == {"weibo"}

    @pytest.mark.asyncio
    async def test_raising_adapter_is_treated_as_empty(self):
        good = MagicMock()
        good.fetch = AsyncMock(return_value=[create_trend_item("ok", hot=1, source="zhihu")])
        bad = MagicMock()
        bad.fetch = AsyncMock(side_effect=RuntimeError("adapter bug"))

        aggregator = TrendAggregator(
            adapters={"weibo": bad, "zhihu": good},
            client_factory=FakeUpstreamClient(),
        )
        payload = await aggregator.aggregate()

        assert [item.title for item in payload.items] == ["ok"]
        good.fetch.assert_awaited_once()
        bad.fetch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_one_shared_session_per_run(self):
        aggregator, upstream = make_aggregator({
            dailyhot_url("weibo"): dailyhot_envelope(ranked_records(1, 1)),
        })

        await aggregator.aggregate()
        assert upstream.sessions_opened == 1
