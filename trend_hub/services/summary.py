"""
AI summary of a single trend item via an OpenAI-compatible chat API.

The user's own key (from their settings) takes precedence over the
service-wide QWEN_API_KEY. Results are cached per title for 24 hours.
"""

import hashlib
import logging
import time
from typing import Any, Callable, Dict, Optional

from openai import APIError, APIStatusError, AsyncOpenAI

from trend_hub.config import (
    QWEN_API_KEY,
    QWEN_BASE_URL,
    QWEN_MODEL,
    SUMMARY_CACHE_TTL_SECONDS,
    SUMMARY_TIMEOUT_SECONDS,
)
from trend_hub.errors import (
    MissingApiKeyError,
    MissingParametersError,
    SummaryUpstreamError,
)
from trend_hub.observability.metrics import api_request_counter, api_request_duration
from trend_hub.services.settings import SettingsService
from trend_hub.storage.interfaces import CacheRepository, StorageError
from trend_hub.types import now_ms

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "你是一个专业的新闻摘要助手，擅长用简洁的语言总结热点新闻的核心内容。"

USER_PROMPT_TEMPLATE = """请用简洁的语言（不超过100字）总结以下热点新闻的核心内容，帮助读者快速了解要点：

标题：{title}
{details}

要求：
1. 直接输出摘要内容，不要有"摘要："等前缀
2. 语言简洁明了，突出关键信息
3. 保持客观中立的语气"""

FALLBACK_SUMMARY = "摘要生成失败"


def summary_cache_key(title: str) -> str:
    digest = hashlib.sha256(title.encode("utf-8")).hexdigest()
    return f"summary:{digest}"


def build_messages(title: str, content: Optional[str] = None) -> list:
    details = f"详情：{content}" if content else ""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": USER_PROMPT_TEMPLATE.format(title=title, details=details)},
    ]


def _default_client_factory(api_key: str) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=api_key,
        base_url=QWEN_BASE_URL,
        timeout=SUMMARY_TIMEOUT_SECONDS,
        max_retries=0,
    )


class SummaryService:
    """
    Generates short summaries for trend items.

    Example:
        ```python
        service = SummaryService(settings_service, cache_repository)
        result = await service.summarize("user-1", "台风登陆广东")
        print(result["summary"])
        ```
    """

    def __init__(
        self,
        settings: SettingsService,
        cache: Optional[CacheRepository] = None,
        model: str = QWEN_MODEL,
        default_api_key: Optional[str] = None,
        client_factory: Callable[[str], Any] = _default_client_factory,
        max_tokens: int = 200,
        temperature: float = 0.7,
    ):
        self.settings = settings
        self.cache = cache
        self.model = model
        self.default_api_key = default_api_key if default_api_key is not None else QWEN_API_KEY
        self.client_factory = client_factory
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def resolve_api_key(self, user_id: str) -> str:
        api_key = await self.settings.get_api_key(user_id) or self.default_api_key
        if not api_key:
            raise MissingApiKeyError("Configure a Qwen API key in settings first")
        return api_key

    async def summarize(
        self,
        user_id: Optional[str],
        title: Optional[str],
        content: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Summarize a trend item.

        Args:
            user_id: Requesting user (used to look up their API key)
            title: Item title
            content: Optional item description

        Returns:
            Dictionary with summary, model and timestamp

        Raises:
            MissingParametersError: If user_id or title is empty
            MissingApiKeyError: If neither the user nor the service has a key
            SummaryUpstreamError: If the chat-completion call fails
        """
        if not user_id or not title:
            raise MissingParametersError("Missing required parameters: userId and title")

        cache_key = summary_cache_key(title)
        cached = await self._cached_summary(cache_key)
        if cached:
            logger.debug(f"Summary cache hit: {cache_key}")
            return {"summary": cached, "model": self.model, "timestamp": now_ms()}

        api_key = await self.resolve_api_key(user_id)
        summary = (await self._complete(api_key, title, content)).strip()

        if self.cache is not None:
            try:
                await self.cache.set(cache_key, summary, ttl_seconds=SUMMARY_CACHE_TTL_SECONDS)
            except StorageError as e:
                logger.warning(f"Failed to cache summary {cache_key}: {e}")

        return {"summary": summary, "model": self.model, "timestamp": now_ms()}

    async def _cached_summary(self, cache_key: str) -> Optional[str]:
        if self.cache is None:
            return None
        try:
            cached = await self.cache.get(cache_key)
        except StorageError as e:
            logger.warning(f"Failed to read summary cache {cache_key}: {e}")
            return None
        return cached if isinstance(cached, str) and cached else None

    async def _complete(self, api_key: str, title: str, content: Optional[str]) -> str:
        client = self.client_factory(api_key)
        start_time = time.time()
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=build_messages(title, content),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except APIStatusError as e:
            self._record("error", start_time, e.status_code)
            logger.error(f"Summary API returned {e.status_code}: {e.message}")
            raise SummaryUpstreamError("AI service temporarily unavailable", status=e.status_code) from e
        except APIError as e:
            self._record("error", start_time, 502)
            logger.error(f"Summary API call failed: {e}")
            raise SummaryUpstreamError("AI service temporarily unavailable") from e
        finally:
            await client.close()

        self._record("ok", start_time, 200)

        choices = getattr(response, "choices", None) or []
        message = choices[0].message.content if choices else None
        return message or FALLBACK_SUMMARY

    @staticmethod
    def _record(outcome: str, start_time: float, status_code: int) -> None:
        api_request_duration.labels(method="POST", endpoint="summary_upstream").observe(
            time.time() - start_time
        )
        api_request_counter.labels(
            method="POST", endpoint="summary_upstream", status_code=status_code
        ).inc()
        logger.debug(f"Summary upstream call finished ({outcome})")
