"""
Exception hierarchy for the trend aggregation service.

Upstream failures of a single source never surface as exceptions; they are
absorbed by the source adapters. The errors here are the ones callers see.
"""

from typing import List, Optional


class TrendHubError(Exception):
    """Base exception for all service errors."""

    code = "TREND_HUB_ERROR"


class InvalidChannelError(TrendHubError):
    """Raised when none of the requested channels is a known platform."""

    code = "INVALID_CHANNEL"

    def __init__(self, requested: List[str], supported: List[str]):
        self.requested = requested
        self.supported = supported
        super().__init__(
            "Unsupported channels: "
            + ",".join(requested)
            + ". Supported platforms: "
            + ",".join(supported)
        )


class AllSourcesEmptyError(TrendHubError):
    """Raised when every requested source returned nothing."""

    code = "ALL_SOURCES_EMPTY"

    def __init__(self, channels: List[str], timestamp: int):
        self.channels = channels
        self.timestamp = timestamp
        super().__init__(
            "Upstream trend services are temporarily unavailable. "
            "Point HOT_API_BASES at a self-hosted or mirrored DailyHotApi instance."
        )


class SummaryError(TrendHubError):
    """Base exception for AI summary failures."""

    code = "SUMMARY_ERROR"


class MissingParametersError(SummaryError):
    """Raised when required request parameters are absent."""

    code = "MISSING_PARAMETERS"


class MissingApiKeyError(SummaryError):
    """Raised when no API key is configured for the summary provider."""

    code = "MISSING_API_KEY"


class SummaryUpstreamError(SummaryError):
    """Raised when the chat-completion provider fails."""

    code = "SUMMARY_UPSTREAM_ERROR"

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)
