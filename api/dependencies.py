"""
FastAPI dependency injection providers.

Services are created once in the application lifespan and handed to
routers through these functions, which tests replace via
app.dependency_overrides.
"""

from fastapi import HTTPException, status

from trend_hub.services import SettingsService, SummaryService, TrendService


def _not_ready(name: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"{name} not initialized",
    )


async def get_trend_service() -> TrendService:
    """
    Get the trends service from application state.

    Raises:
        HTTPException: If the service is not initialized
    """
    from api.main import app_state

    if app_state.trend_service is None:
        raise _not_ready("Trend service")
    return app_state.trend_service


async def get_settings_service() -> SettingsService:
    """Get the user settings service from application state."""
    from api.main import app_state

    if app_state.settings_service is None:
        raise _not_ready("Settings service")
    return app_state.settings_service


async def get_summary_service() -> SummaryService:
    """Get the AI summary service from application state."""
    from api.main import app_state

    if app_state.summary_service is None:
        raise _not_ready("Summary service")
    return app_state.summary_service
