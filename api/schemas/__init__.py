"""
API schemas for request and response models.
"""

from api.schemas.common import ErrorResponse, HealthResponse, SuccessResponse
from api.schemas.trends import (
    SearchRequest,
    SearchResponse,
    SummaryRequest,
    SummaryResponse,
    TrendsResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "SuccessResponse",
    "SearchRequest",
    "SearchResponse",
    "SummaryRequest",
    "SummaryResponse",
    "TrendsResponse",
]
