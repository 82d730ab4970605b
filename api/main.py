"""
FastAPI main application for the trend aggregation service.

This module initializes the FastAPI app, configures middleware, error handlers,
and includes all API routers.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import __version__
from api.middleware import RequestMetricsMiddleware
from api.routers import health, metrics, search, settings, summary, trends
from api.schemas.common import ErrorResponse
from trend_hub.aggregator import TrendAggregator
from trend_hub.cache import ResponseCache
from trend_hub.config import (
    CACHE_BACKEND,
    CORS_ORIGINS,
    LOG_FORMAT,
    LOG_LEVEL,
    REDIS_DB,
    REDIS_HOST,
    REDIS_PASSWORD,
    REDIS_PORT,
)
from trend_hub.errors import (
    AllSourcesEmptyError,
    InvalidChannelError,
    MissingApiKeyError,
    MissingParametersError,
    SummaryUpstreamError,
    TrendHubError,
)
from trend_hub.observability.logging import setup_logging
from trend_hub.services import SettingsService, SummaryService, TrendService
from trend_hub.storage import CacheRepository, create_cache_repository
from trend_hub.types import now_ms

logger = logging.getLogger(__name__)


# Application state
class AppState:
    """Application state container."""

    def __init__(self):
        self.repository: Optional[CacheRepository] = None
        self.trend_service: Optional[TrendService] = None
        self.settings_service: Optional[SettingsService] = None
        self.summary_service: Optional[SummaryService] = None
        self.started_at: Optional[datetime] = None


app_state = AppState()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown events.

    Creates the shared key/value repository and the services built on it.
    """
    setup_logging(level=LOG_LEVEL, json_format=LOG_FORMAT == "json")
    logger.info("Starting trend aggregation API...")
    app_state.started_at = datetime.utcnow()

    app_state.repository = await create_cache_repository(
        backend=CACHE_BACKEND,
        host=REDIS_HOST,
        port=REDIS_PORT,
        db=REDIS_DB,
        password=REDIS_PASSWORD,
    )

    aggregator = TrendAggregator()
    app_state.trend_service = TrendService(aggregator, ResponseCache(app_state.repository))
    app_state.settings_service = SettingsService(app_state.repository)
    app_state.summary_service = SummaryService(app_state.settings_service, app_state.repository)
    logger.info(f"API startup complete ({len(aggregator.supported_channels)} platforms)")

    yield

    logger.info("Shutting down trend aggregation API...")
    await app_state.trend_service.close()
    try:
        await app_state.repository.close()
    except Exception as e:
        logger.error(f"Error closing cache repository: {e}")
    logger.info("API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Trend Hub API",
    description="""
    ## Multi-platform trending topics

    Fetches the trending lists of Chinese content platforms (Weibo, Zhihu,
    Bilibili, Douyin, Baidu and more) concurrently, normalizes them into one
    schema, removes cross-platform near duplicates and ranks by hotness.

    ### Features

    - **Fallback chain**: DailyHotApi mirrors, then official public endpoints
    - **Deduplication**: character-level title similarity across platforms
    - **Short-TTL cache**: stale-while-revalidate responses
    - **AI summaries**: one-paragraph summaries via an OpenAI-compatible API
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# Middleware configuration
app.add_middleware(RequestMetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers

def error_response(
    status_code: int,
    error: str,
    code: str,
    message: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    **extra: Any,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        message=message,
        code=code,
        timestamp=extra.pop("timestamp", None) or now_ms(),
        **extra,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


@app.exception_handler(InvalidChannelError)
async def invalid_channel_handler(request: Request, exc: InvalidChannelError):
    """No requested channel is supported; nothing was fetched."""
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        error="Invalid channels",
        code=exc.code,
        message=str(exc),
        details={"supported": exc.supported},
    )


@app.exception_handler(AllSourcesEmptyError)
async def all_sources_empty_handler(request: Request, exc: AllSourcesEmptyError):
    """Every upstream came back empty; treated as an upstream outage."""
    return error_response(
        status.HTTP_502_BAD_GATEWAY,
        error="Failed to fetch trends",
        code=exc.code,
        message=str(exc),
        timestamp=exc.timestamp,
        channels=exc.channels,
        items=[],
    )


@app.exception_handler(MissingParametersError)
@app.exception_handler(MissingApiKeyError)
async def summary_client_error_handler(request: Request, exc: TrendHubError):
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        error=str(exc),
        code=exc.code,
    )


@app.exception_handler(SummaryUpstreamError)
async def summary_upstream_handler(request: Request, exc: SummaryUpstreamError):
    return error_response(
        status.HTTP_502_BAD_GATEWAY,
        error=str(exc),
        code=exc.code,
        details=exc.status,
    )


@app.exception_handler(TrendHubError)
async def trend_hub_error_handler(request: Request, exc: TrendHubError):
    logger.error(f"Unhandled service error: {exc}", exc_info=True)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="Internal Server Error",
        code=exc.code,
        message=str(exc),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions (including 405) with the error envelope."""
    return error_response(
        exc.status_code,
        error=str(exc.detail),
        code=f"HTTP_{exc.status_code}",
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        error="Validation Error",
        code="VALIDATION_ERROR",
        message=str(exc),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        error="Internal Server Error",
        code="INTERNAL_ERROR",
        message="An unexpected error occurred",
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root() -> Dict[str, Any]:
    """API root endpoint providing basic information."""
    return {
        "name": "Trend Hub API",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
        "endpoints": {
            "trends": "/api/trends",
            "search": "/api/search",
            "summary": "/api/summary",
            "settings": "/api/settings",
            "health": "/api/health",
            "metrics": "/metrics",
        },
    }


# Include routers
for module in (health, trends, search, summary, settings):
    app.include_router(module.router, prefix="/api")
app.include_router(metrics.router)


def get_app_state() -> AppState:
    """Dependency to get application state."""
    return app_state


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        log_level="info",
    )
