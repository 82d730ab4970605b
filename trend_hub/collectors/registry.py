"""
Fallback Registry - discovery and lookup of platform fallback sources.

Each fallback module in this package describes one public endpoint as a
FallbackSource and registers it at import time:

    from trend_hub.collectors.registry import register_fallback

    register_fallback(FallbackSource(platform="weibo", ...))

auto_discover_fallbacks() imports every such module so that adding a
platform fallback is a matter of dropping a new file next to the others.
"""

import importlib
import logging
from pathlib import Path
from typing import Dict, List, Optional

from trend_hub.collectors.base import FallbackSource

logger = logging.getLogger(__name__)

# Global registry of fallback sources
_FALLBACK_REGISTRY: Dict[str, FallbackSource] = {}

# Package modules that are infrastructure, not fallback sources
_NON_SOURCE_MODULES = {"__init__", "registry", "base", "client", "dailyhot", "adapter"}


def register_fallback(source: FallbackSource) -> FallbackSource:
    """
    Register a fallback source for its platform.

    Args:
        source: Fallback description

    Returns:
        The source (unchanged)
    """
    if source.platform in _FALLBACK_REGISTRY:
        logger.warning(f"Fallback for '{source.platform}' is already registered. Overwriting.")

    _FALLBACK_REGISTRY[source.platform] = source
    logger.debug(f"Registered fallback: {source.platform} -> {source.url}")
    return source


def get_fallback(name: str) -> Optional[FallbackSource]:
    """Get the fallback registered under name, or None."""
    return _FALLBACK_REGISTRY.get(name)


def list_fallback_names() -> List[str]:
    """Get the names of all registered fallbacks."""
    return list(_FALLBACK_REGISTRY.keys())


def auto_discover_fallbacks():
    """Import every fallback module in this package."""
    collectors_dir = Path(__file__).parent

    for file_path in sorted(collectors_dir.glob("*.py")):
        module_name = file_path.stem
        if module_name in _NON_SOURCE_MODULES:
            continue

        try:
            importlib.import_module(f".{module_name}", package="trend_hub.collectors")
            logger.debug(f"Loaded fallback module: {module_name}")
        except ImportError as e:
            logger.error(f"Failed to load fallback '{module_name}': {e}", exc_info=True)
