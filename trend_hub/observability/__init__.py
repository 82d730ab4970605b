"""
Observability module for metrics and logging.
"""

from trend_hub.observability.metrics import (
    metrics_registry,
    upstream_request_counter,
    aggregation_duration,
    cache_lookup_counter,
    export_metrics,
)

from trend_hub.observability.logging import (
    setup_logging,
    log_context,
)

__all__ = [
    # Metrics
    "metrics_registry",
    "upstream_request_counter",
    "aggregation_duration",
    "cache_lookup_counter",
    "export_metrics",
    # Logging
    "setup_logging",
    "log_context",
]
