"""
Feedback endpoints - citizen ratings, readable by officers.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from app.models.community import FeedbackCreate, FeedbackResponse
from app.models.report import CreatedResponse
from app.models.user import CurrentUser
from app.services.feedback_service import FeedbackService, get_feedback_service
from app.utils.security import get_current_user

router = APIRouter(prefix="/feedback", tags=["Feedback"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CreatedResponse)
async def submit_feedback(
    request: FeedbackCreate,
    current_user: CurrentUser = Depends(get_current_user),
    feedback: FeedbackService = Depends(get_feedback_service),
):
    """
    Submit a 1-5 rating, optionally about a specific report.

    Raises:
        400: Rating missing or outside 1-5
    """
    created = feedback.submit(
        rating=request.rating,
        user=current_user,
        comments=request.comments,
        report_id=request.report_id,
    )
    return {"id": created.id, "message": "Feedback submitted successfully"}


@router.get("", response_model=List[FeedbackResponse])
async def list_feedback(
    current_user: CurrentUser = Depends(get_current_user),
    feedback: FeedbackService = Depends(get_feedback_service),
):
    """All feedback, newest first (ward officers and admins only)."""
    return feedback.list_all(current_user)
