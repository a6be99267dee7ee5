"""
Feedback Router
===============

Student submissions and feedback listings.

- POST /api/feedback                      - submit, returns the analyzed record
- GET  /api/feedback/all                  - every record, newest first
- GET  /api/feedback/student/{student_id} - one student's records
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from feedtrack.dependencies import get_feedback_service
from feedtrack.models.feedback import FeedbackCreate, FeedbackRecord
from feedtrack.services.feedback_service import FeedbackService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=FeedbackRecord, status_code=201)
async def create_feedback(
    body: FeedbackCreate,
    service: FeedbackService = Depends(get_feedback_service),
):
    """Submit new feedback. Always analyzed; only empty text is rejected."""
    return await service.submit_feedback(
        body.text,
        student_id=body.student_id,
        student_name=body.student_name,
    )


@router.get("/all", response_model=List[FeedbackRecord])
async def list_all_feedback(service: FeedbackService = Depends(get_feedback_service)):
    return await service.list_feedback()


@router.get("/student/{student_id}", response_model=List[FeedbackRecord])
async def list_student_feedback(
    student_id: str,
    service: FeedbackService = Depends(get_feedback_service),
):
    return await service.list_feedback(student_id=student_id)
