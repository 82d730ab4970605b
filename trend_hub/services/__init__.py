"""
Application services composed by the API layer.
"""

from trend_hub.services.search import DEFAULT_SEARCH_LIMIT, search_items
from trend_hub.services.settings import SettingsService
from trend_hub.services.summary import SummaryService
from trend_hub.services.trends import TrendService, TrendsResult

__all__ = [
    "DEFAULT_SEARCH_LIMIT",
    "search_items",
    "SettingsService",
    "SummaryService",
    "TrendService",
    "TrendsResult",
]
