"""
Prometheus metrics for the trend aggregation service.

This module defines the metrics exported at /metrics:
- Upstream request outcomes per platform and strategy
- Aggregation run duration and result sizes
- Response cache lookups
- API request rates and latencies
"""

import time
from functools import wraps
from typing import Callable

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    CollectorRegistry,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# Create a custom registry for this application
metrics_registry = CollectorRegistry()


# ============================================================================
# Upstream Metrics
# ============================================================================

upstream_request_counter = Counter(
    "upstream_requests_total",
    "Total number of upstream listing requests",
    ["platform", "strategy", "outcome"],  # outcome: ok, empty, error
    registry=metrics_registry,
)

upstream_request_duration = Histogram(
    "upstream_request_duration_seconds",
    "Upstream listing request duration in seconds",
    ["strategy"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 4.0, 8.0, 16.0],
    registry=metrics_registry,
)

items_collected_counter = Counter(
    "items_collected_total",
    "Total number of normalized items collected from platforms",
    ["platform"],
    registry=metrics_registry,
)

# ============================================================================
# Aggregation Metrics
# ============================================================================

aggregation_duration = Histogram(
    "aggregation_duration_seconds",
    "Duration of one aggregation run (fan-out to merged response)",
    buckets=[0.25, 0.5, 1.0, 2.0, 4.0, 8.0, 16.0],
    registry=metrics_registry,
)

aggregation_counter = Counter(
    "aggregations_total",
    "Total number of aggregation runs",
    ["result"],  # result: ok, empty
    registry=metrics_registry,
)

duplicates_dropped_counter = Counter(
    "duplicates_dropped_total",
    "Items dropped as near-duplicates of a hotter item",
    registry=metrics_registry,
)

# ============================================================================
# Cache Metrics
# ============================================================================

cache_lookup_counter = Counter(
    "response_cache_lookups_total",
    "Response cache lookups",
    ["result"],  # result: hit, stale, miss, error
    registry=metrics_registry,
)

# ============================================================================
# API Metrics
# ============================================================================

api_request_counter = Counter(
    "api_requests_total",
    "Total number of API requests",
    ["method", "endpoint", "status_code"],
    registry=metrics_registry,
)

api_request_duration = Histogram(
    "api_request_duration_seconds",
    "API request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=metrics_registry,
)

# ============================================================================
# Application Info
# ============================================================================

app_info = Info(
    "app",
    "Application information",
    registry=metrics_registry,
)

app_info.info({
    "name": "Trend Hub",
    "version": "1.0.0",
})


def track_duration(histogram: Histogram):
    """
    Decorator recording the wall-clock duration of an async call.

    Example:
        @track_duration(aggregation_duration)
        async def aggregate(...):
            pass
    """
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                histogram.observe(time.perf_counter() - start_time)

        return wrapper
    return decorator


def export_metrics() -> bytes:
    """Render the application registry in Prometheus text format."""
    return generate_latest(metrics_registry)


__all__ = [
    "metrics_registry",
    "upstream_request_counter",
    "upstream_request_duration",
    "items_collected_counter",
    "aggregation_duration",
    "aggregation_counter",
    "duplicates_dropped_counter",
    "cache_lookup_counter",
    "api_request_counter",
    "api_request_duration",
    "track_duration",
    "export_metrics",
    "CONTENT_TYPE_LATEST",
]
