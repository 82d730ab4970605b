"""
User settings endpoints.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from api.dependencies import get_settings_service
from api.schemas.common import SuccessResponse
from trend_hub.services import SettingsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get(
    "",
    response_model=Dict[str, Any],
    status_code=status.HTTP_200_OK,
    summary="Get user settings",
)
async def get_settings(
    userId: Optional[str] = Query(None, description="User identifier"),
    service: SettingsService = Depends(get_settings_service),
) -> Dict[str, Any]:
    """
    Get stored settings for a user.

    The API key itself is never returned: qwenApiKey is masked and
    hasApiKey reports whether one is configured.
    """
    return await service.get(userId)


@router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Save user settings",
)
async def save_settings(
    userId: Optional[str] = Query(None, description="User identifier"),
    updates: Dict[str, Any] = Body(default_factory=dict),
    service: SettingsService = Depends(get_settings_service),
) -> SuccessResponse:
    """Merge the request body over the stored settings."""
    await service.save(userId, updates)
    return SuccessResponse(success=True, message="Settings saved")
