"""
Prometheus metrics endpoint.
"""

from fastapi import APIRouter, Response

from trend_hub.observability.metrics import CONTENT_TYPE_LATEST, export_metrics

router = APIRouter(
    prefix="/metrics",
    tags=["Monitoring"],
)


@router.get("", response_class=Response)
async def prometheus_metrics():
    """
    Expose Prometheus metrics.

    Example metrics exposed:
        - upstream_requests_total{platform="weibo",strategy="dailyhot",outcome="ok"} 12
        - aggregation_duration_seconds_bucket{le="2.5"} 10
        - response_cache_lookups_total{result="hit"} 42

    Usage:
        ```yaml
        scrape_configs:
          - job_name: 'trend-hub'
            static_configs:
              - targets: ['api:8000']
            metrics_path: '/metrics'
        ```
    """
    return Response(content=export_metrics(), media_type=CONTENT_TYPE_LATEST)
