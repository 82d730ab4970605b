"""
Integration tests for FastAPI REST API endpoints.

Services are wired over FakeUpstreamClient and MockCacheRepository and
injected with app.dependency_overrides, so no network or Redis is needed.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient
from openai import APIStatusError

from api.dependencies import get_settings_service, get_summary_service, get_trend_service
from api.main import app
from api.routers.trends import parse_limit
from tests.fixtures import dailyhot_envelope, dailyhot_record, dailyhot_url, make_aggregator, ranked_records
from tests.mocks.storage import MockCacheRepository
from trend_hub.cache import ResponseCache
from trend_hub.services import SettingsService, SummaryService, TrendService


# Fixtures

@pytest.fixture
def upstream_responses():
    return {
        dailyhot_url("weibo"): dailyhot_envelope([
            dailyhot_record("台风登陆广东", hot=900000),
            dailyhot_record("程序员节快乐", hot=5000, desc="typhoon unrelated"),
        ]),
        dailyhot_url("zhihu"): dailyhot_envelope([
            dailyhot_record("台风登陆广东", hot=120000),
            dailyhot_record("如何看待台风天气", hot=80000),
        ]),
    }


@pytest.fixture
def services(upstream_responses):
    """Wire services over fakes and install them as dependency overrides."""
    repository = MockCacheRepository()
    aggregator, upstream = make_aggregator(upstream_responses, platforms=["weibo", "zhihu"])
    trend_service = TrendService(aggregator, ResponseCache(repository, fresh_ttl=60, stale_ttl=300))
    settings_service = SettingsService(repository)

    chat_client = MagicMock()
    chat_client.chat.completions.create = AsyncMock(
        return_value=SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="台风今日登陆。"))]
        )
    )
    chat_client.close = AsyncMock()
    summary_service = SummaryService(
        settings_service,
        repository,
        model="qwen-turbo",
        default_api_key="env-key",
        client_factory=MagicMock(return_value=chat_client),
    )

    app.dependency_overrides[get_trend_service] = lambda: trend_service
    app.dependency_overrides[get_settings_service] = lambda: settings_service
    app.dependency_overrides[get_summary_service] = lambda: summary_service

    yield SimpleNamespace(upstream=upstream, repository=repository, chat_client=chat_client)

    app.dependency_overrides.clear()


@pytest.fixture
def client(services):
    """Create a test client for the FastAPI app."""
    return TestClient(app)


# Trends

class TestTrendsEndpoint:
    """Tests for GET /api/trends."""

    def test_aggregated_trends(self, client, services):
        response = client.get("/api/trends", params={"channels": "weibo,zhihu"})

        assert response.status_code == 200
        data = response.json()
        assert data["channels"] == ["weibo", "zhihu"]
        titles = [item["title"] for item in data["items"]]
        assert titles == ["台风登陆广东", "如何看待台风天气", "程序员节快乐"]
        assert data["items"][0]["source"] == "weibo"
        assert response.headers["X-Cache"] == "MISS"
        assert response.headers["Cache-Control"] == "public, max-age=60, stale-while-revalidate=300"

    def test_second_request_is_cached(self, client, services):
        client.get("/api/trends", params={"channels": "weibo,zhihu", "limit": "10"})
        calls = len(services.upstream.calls)

        response = client.get("/api/trends", params={"channels": "zhihu,weibo", "limit": "10"})

        assert response.status_code == 200
        assert response.headers["X-Cache"] == "HIT"
        assert len(services.upstream.calls) == calls

    def test_fresh_bypasses_cache(self, client, services):
        client.get("/api/trends", params={"channels": "weibo"})
        response = client.get("/api/trends", params={"channels": "weibo", "fresh": "1"})

        assert response.headers["X-Cache"] == "MISS"
        assert len(services.upstream.calls) == 2

    def test_limit(self, client, services):
        response = client.get("/api/trends", params={"channels": "weibo,zhihu", "limit": "1"})
        assert len(response.json()["items"]) == 1

    def test_unparseable_limit_uses_default(self, client, services):
        response = client.get("/api/trends", params={"channels": "weibo", "limit": "abc"})
        assert response.status_code == 200
        assert len(response.json()["items"]) == 2

    def test_limit_uses_leading_integer(self, client, services):
        response = client.get("/api/trends", params={"channels": "weibo,zhihu", "limit": "1.9"})
        assert len(response.json()["items"]) == 1

    @pytest.mark.parametrize(
        "raw,expected",
        [("5", 5), (" 5", 5), ("5.5", 5), ("5abc", 5), ("-3", -3), ("abc", None), ("", None), (None, None)],
    )
    def test_parse_limit(self, raw, expected):
        assert parse_limit(raw) == expected

    def test_invalid_channels(self, client, services):
        response = client.get("/api/trends", params={"channels": "foo,bar"})

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "INVALID_CHANNEL"
        assert "weibo" in data["message"]
        assert services.upstream.calls == []

    def test_all_sources_empty(self, client, services):
        services.upstream.responses.clear()

        response = client.get("/api/trends", params={"channels": "weibo,zhihu"})

        assert response.status_code == 502
        data = response.json()
        assert data["code"] == "ALL_SOURCES_EMPTY"
        assert data["items"] == []
        assert data["channels"] == ["weibo", "zhihu"]
        assert "HOT_API_BASES" in data["message"]
        assert isinstance(data["timestamp"], int)

    def test_wrong_method(self, client, services):
        response = client.post("/api/trends")
        assert response.status_code == 405
        assert response.json()["code"] == "HTTP_405"


# Search

class TestSearchEndpoint:
    """Tests for /api/search."""

    def test_query_required(self, client, services):
        response = client.get("/api/search", params={"q": "  "})
        assert response.status_code == 400

    def test_no_snapshot_yet(self, client, services):
        response = client.get("/api/search", params={"q": "台风", "channels": "weibo"})

        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["total"] == 0
        assert data["message"]
        assert services.upstream.calls == []

    def test_searches_latest_snapshot(self, client, services):
        client.get("/api/trends", params={"channels": "weibo,zhihu"})
        calls = len(services.upstream.calls)

        response = client.get("/api/search", params={"q": "台风", "channels": "zhihu,weibo"})

        data = response.json()
        assert data["total"] == 2
        assert [item["title"] for item in data["items"]] == ["台风登陆广东", "如何看待台风天气"]
        assert len(services.upstream.calls) == calls

    def test_small_limit_request_does_not_shrink_search(self, client, services):
        client.get("/api/trends", params={"channels": "weibo,zhihu", "limit": "100"})
        client.get("/api/trends", params={"channels": "weibo,zhihu", "limit": "1"})

        response = client.get("/api/search", params={"q": "台风", "channels": "weibo,zhihu"})

        assert response.json()["total"] == 2

    def test_search_supplied_items(self, client, services):
        response = client.post(
            "/api/search",
            json={
                "q": "typhoon",
                "items": [
                    {"title": "Other", "desc": "typhoon mention", "hot": 999},
                    {"title": "Typhoon hits", "hot": 1},
                ],
            },
        )

        assert response.status_code == 200
        assert [item["title"] for item in response.json()["items"]] == ["Typhoon hits", "Other"]

    def test_search_supplied_items_requires_query(self, client, services):
        response = client.post("/api/search", json={"items": []})
        assert response.status_code == 400


# Summary

class TestSummaryEndpoint:
    """Tests for POST /api/summary."""

    def test_summary(self, client, services):
        response = client.post("/api/summary", json={"userId": "u1", "title": "台风登陆广东"})

        assert response.status_code == 200
        data = response.json()
        assert data["summary"] == "台风今日登陆。"
        assert data["model"] == "qwen-turbo"

    def test_missing_parameters(self, client, services):
        response = client.post("/api/summary", json={"userId": "u1"})
        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_PARAMETERS"

    def test_upstream_failure(self, client, services):
        failure = httpx.Response(500, request=httpx.Request("POST", "https://dashscope.test"))
        services.chat_client.chat.completions.create.side_effect = APIStatusError(
            "boom", response=failure, body=None
        )

        response = client.post("/api/summary", json={"userId": "u1", "title": "t"})

        assert response.status_code == 502
        assert response.json()["details"] == 500

    def test_wrong_method(self, client, services):
        assert client.get("/api/summary").status_code == 405


# Settings

class TestSettingsEndpoint:
    """Tests for /api/settings."""

    def test_user_id_required(self, client, services):
        assert client.get("/api/settings").status_code == 400
        assert client.post("/api/settings", json={"theme": "dark"}).status_code == 400

    def test_save_then_read_masked(self, client, services):
        saved = client.post(
            "/api/settings",
            params={"userId": "u1"},
            json={"qwenApiKey": "sk-secret", "theme": "dark"},
        )
        assert saved.status_code == 200
        assert saved.json()["success"] is True

        data = client.get("/api/settings", params={"userId": "u1"}).json()
        assert data["qwenApiKey"] == "******"
        assert data["hasApiKey"] is True
        assert data["theme"] == "dark"
        assert isinstance(data["updatedAt"], int)

    def test_user_key_used_for_summary(self, client, services):
        client.post("/api/settings", params={"userId": "u1"}, json={"qwenApiKey": "user-key"})
        client.post("/api/summary", json={"userId": "u1", "title": "another title"})

        summary_service = app.dependency_overrides[get_summary_service]()
        summary_service.client_factory.assert_called_with("user-key")


# Health & metrics

class TestHealthEndpoints:
    """Tests for health and metrics."""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == "1.0.0"
        assert isinstance(data["timestamp"], int)

    def test_metrics(self, client):
        client.get("/api/health")
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert "app_info" in response.text
        assert "api_requests_total" in response.text

    def test_request_id_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    def test_root(self, client):
        assert client.get("/").json()["endpoints"]["trends"] == "/api/trends"
