"""
Common API schemas used across endpoints.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    error: str = Field(..., description="Short error summary")
    message: Optional[str] = Field(None, description="Human-readable explanation")
    code: str = Field(..., description="Error code")
    timestamp: int = Field(..., description="Epoch milliseconds")
    channels: Optional[List[str]] = Field(None, description="Channels the request resolved to")
    items: Optional[List[Any]] = Field(None, description="Always empty on aggregation failure")
    details: Optional[Any] = Field(None, description="Upstream status or validation details")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Failed to fetch trends",
                "message": "Upstream trend services are temporarily unavailable.",
                "code": "ALL_SOURCES_EMPTY",
                "timestamp": 1705314600000,
                "channels": ["weibo", "zhihu"],
                "items": [],
            }
        }


class SuccessResponse(BaseModel):
    """Standard success response."""

    success: bool = Field(True, description="Operation success status")
    message: Optional[str] = Field(None, description="Success message")

    class Config:
        json_schema_extra = {
            "example": {"success": True, "message": "Settings saved"}
        }


class HealthResponse(BaseModel):
    """Liveness probe response."""

    status: str = Field(..., description="Service status")
    timestamp: int = Field(..., description="Epoch milliseconds")
    version: str = Field(..., description="API version")

    class Config:
        json_schema_extra = {
            "example": {"status": "ok", "timestamp": 1705314600000, "version": "1.0.0"}
        }
