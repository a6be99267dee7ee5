"""
Insights Router
===============

POST /api/insights/generate - AI (or offline) trend summary over the
most recent feedback window. POST /api/insights is kept as an alias for
older dashboard builds.
"""

from fastapi import APIRouter, Depends

from feedtrack.dependencies import get_feedback_service
from feedtrack.models.feedback import InsightResult
from feedtrack.services.feedback_service import FeedbackService

router = APIRouter()


@router.post("/generate", response_model=InsightResult)
@router.post("", response_model=InsightResult, include_in_schema=False)
async def generate_insights(service: FeedbackService = Depends(get_feedback_service)):
    return await service.generate_insights()
