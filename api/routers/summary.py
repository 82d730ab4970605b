"""
AI summary endpoint.
"""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_summary_service
from api.schemas.trends import SummaryRequest, SummaryResponse
from trend_hub.services import SummaryService

router = APIRouter(prefix="/summary", tags=["Summary"])


@router.post(
    "",
    response_model=SummaryResponse,
    status_code=status.HTTP_200_OK,
    summary="Summarize a trend item",
    responses={400: {"description": "Missing parameters or API key"}, 502: {"description": "AI service failed"}},
)
async def summarize(
    request: SummaryRequest,
    service: SummaryService = Depends(get_summary_service),
) -> SummaryResponse:
    result = await service.summarize(request.userId, request.title, request.content)
    return SummaryResponse(**result)
