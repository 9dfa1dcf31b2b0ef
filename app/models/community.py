"""
Community engagement models: cleanup events, leaderboard, comments,
notifications and feedback.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class EventResponse(BaseModel):
    id: int
    ward_id: int
    ward_name: str
    title: str
    description: Optional[str] = None
    date: datetime
    location: Optional[str] = None
    rsvp_count: int = 0


class LeaderboardEntry(BaseModel):
    name: str
    points: int
    badge: str


class CommentCreate(BaseModel):
    report_id: int = Field(..., description="Report being discussed")
    content: str = Field(..., min_length=1, max_length=2000)


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    message: str
    read_status: bool
    created_at: datetime


class FeedbackCreate(BaseModel):
    """
    Feedback submission. The 1-5 rating range is checked by the feedback
    service so that an out-of-range value is reported as a validation error.
    """
    rating: Optional[int] = None
    comments: Optional[str] = Field(None, max_length=2000)
    report_id: Optional[int] = None


class FeedbackResponse(BaseModel):
    id: int
    user_id: int
    report_id: Optional[int] = None
    rating: int
    comments: Optional[str] = None
    created_at: datetime
    user_name: str
    report_category: Optional[str] = None
