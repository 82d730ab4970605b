"""
HTTP middleware: request ids in the log context and per-route metrics.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from trend_hub.observability.logging import log_context
from trend_hub.observability.metrics import api_request_counter, api_request_duration

logger = logging.getLogger(__name__)


class RequestMetricsMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id and records its duration and status.

    Behavior:
    - Uses the X-Request-ID header when present, otherwise generates one
    - Echoes the id in the response headers
    - Labels metrics with the route template, not the raw path
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.HEADER_NAME) or uuid.uuid4().hex[:16]
        start_time = time.perf_counter()

        with log_context(request_id=request_id, path=request.url.path):
            response = await call_next(request)

        route = request.scope.get("route")
        endpoint = getattr(route, "path", None) or "unmatched"
        api_request_duration.labels(method=request.method, endpoint=endpoint).observe(
            time.perf_counter() - start_time
        )
        api_request_counter.labels(
            method=request.method, endpoint=endpoint, status_code=response.status_code
        ).inc()

        response.headers[self.HEADER_NAME] = request_id
        return response
