import os
import json
import logging
from typing import Dict, Any, List
from dotenv import load_dotenv

from trend_hub.types import Platform, PlatformConfig

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

# Upstream fetch configuration
DEFAULT_HOT_API_BASES = ["https://api-hot.imsyy.top"]
UPSTREAM_TIMEOUT_SECONDS = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "8"))
UPSTREAM_USER_AGENT = os.getenv(
    "UPSTREAM_USER_AGENT",
    "Mozilla/5.0 (compatible; TrendHub/1.0; +https://github.com/trend-hub)",
)

# Cache backend configuration
CACHE_BACKEND = os.getenv("CACHE_BACKEND", "redis")
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD", None)

# AI summary (OpenAI-compatible chat completion endpoint)
QWEN_API_KEY = os.getenv("QWEN_API_KEY", "")
QWEN_BASE_URL = os.getenv(
    "QWEN_BASE_URL", "https://dashscope.aliyuncs.com/compatible-mode/v1"
)
QWEN_MODEL = os.getenv("QWEN_MODEL", "qwen-turbo")
SUMMARY_TIMEOUT_SECONDS = float(os.getenv("SUMMARY_TIMEOUT_SECONDS", "20"))
SUMMARY_CACHE_TTL_SECONDS = 86400

# API server configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")


# ============================================================================
# Platform catalogue
# ============================================================================

PLATFORMS: Dict[str, PlatformConfig] = {
    cfg.key.value: cfg
    for cfg in [
        PlatformConfig(key=Platform.WEIBO, endpoint="/weibo", name="微博", fallback="weibo"),
        PlatformConfig(key=Platform.ZHIHU, endpoint="/zhihu", name="知乎", fallback="zhihu"),
        PlatformConfig(key=Platform.BILIBILI, endpoint="/bilibili", name="B站", fallback="bilibili"),
        PlatformConfig(key=Platform.DOUYIN, endpoint="/douyin", name="抖音"),
        PlatformConfig(key=Platform.BAIDU, endpoint="/baidu", name="百度", fallback="baidu"),
        PlatformConfig(key=Platform.TOUTIAO, endpoint="/toutiao", name="头条"),
        PlatformConfig(key=Platform.DOUBAN, endpoint="/douban-movie", name="豆瓣"),
        PlatformConfig(key=Platform.JUEJIN, endpoint="/juejin", name="掘金"),
        PlatformConfig(key=Platform.GITHUB, endpoint="/github", name="GitHub"),
        PlatformConfig(key=Platform.V2EX, endpoint="/v2ex", name="V2EX"),
    ]
}


def get_hot_api_bases() -> List[str]:
    """
    Get the ordered list of DailyHotApi mirrors.

    Environment overrides come first, followed by the built-in defaults.
    Duplicates are removed while keeping the first occurrence.
    """
    raw = os.getenv("EDGE_TRENDHUB_HOT_API_BASES") or os.getenv("HOT_API_BASES") or ""
    from_env = [part.strip() for part in raw.split(",") if part.strip()]

    bases: List[str] = []
    for base in from_env + DEFAULT_HOT_API_BASES:
        base = base.rstrip("/")
        if base not in bases:
            bases.append(base)
    return bases


# ============================================================================
# Settings Loader for config/settings.json
# ============================================================================

# Cache for loaded settings
_settings_cache = None

DEFAULT_SETTINGS: Dict[str, Any] = {
    "aggregation": {
        "dedup_threshold": 0.7,
        "max_items_per_platform": 20,
        "default_limit": 100,
        "max_limit": 200,
    },
    "cache": {
        "fresh_ttl_seconds": 60,
        "stale_ttl_seconds": 300,
    },
}


def get_settings_path() -> str:
    """Get the path to settings.json file."""
    # Get the project root directory (parent of trend_hub)
    current_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(current_dir)
    return os.environ.get(
        "TREND_HUB_SETTINGS", os.path.join(project_root, "config", "settings.json")
    )


def load_settings(force_reload: bool = False) -> Dict[str, Any]:
    """
    Load settings from config/settings.json.

    Args:
        force_reload: If True, reload from file even if cached

    Returns:
        Dictionary of settings with defaults for missing values
    """
    global _settings_cache

    if _settings_cache is not None and not force_reload:
        return _settings_cache

    # Section-wise merge so a partial file keeps the remaining defaults
    settings = {section: dict(values) for section, values in DEFAULT_SETTINGS.items()}

    settings_path = get_settings_path()
    if os.path.exists(settings_path):
        try:
            with open(settings_path, "r", encoding="utf-8") as f:
                file_settings = json.load(f)

            for section, values in file_settings.items():
                if isinstance(values, dict):
                    settings.setdefault(section, {}).update(values)
                else:
                    settings[section] = values
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Error loading settings from {settings_path}: {e}, using defaults")
    else:
        logger.info(f"Settings file not found at {settings_path}, using defaults")

    _settings_cache = settings
    return settings


def get_aggregation_config() -> Dict[str, Any]:
    """Get aggregation tunables (dedup threshold, per-platform cap, limits)."""
    return load_settings()["aggregation"]


def get_cache_config() -> Dict[str, Any]:
    """Get response cache TTL windows."""
    return load_settings()["cache"]
