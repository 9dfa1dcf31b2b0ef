"""
Pydantic models for citizen reports.
These models handle validation for report submission and responses.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

from app.models.enums import ReportStatus, Urgency


class ReportCreate(BaseModel):
    """
    Model for creating a new report (incoming POST request).
    Any status sent by the client is ignored; new reports always start as pending.
    """
    ward_id: int = Field(..., description="Ward the issue is located in")
    category: str = Field(..., min_length=1, max_length=100, description="Free-form, usually one of the suggested categories")
    urgency: Urgency = Field(..., description="low | medium | high | critical")
    description: str = Field(default="", max_length=2000, description="What the citizen observed")
    lat: float = Field(..., ge=-90, le=90, description="Latitude coordinate")
    lng: float = Field(..., ge=-180, le=180, description="Longitude coordinate")
    image_urls: Optional[List[str]] = Field(None, description="Optional list of image URLs")

    class Config:
        json_schema_extra = {
            "example": {
                "ward_id": 2,
                "category": "Garbage Pile",
                "urgency": "high",
                "description": "Garbage heap near the Anna Nagar bus stop.",
                "lat": 9.9252,
                "lng": 78.1450,
                "image_urls": ["https://example.com/photo.jpg"],
            }
        }
        extra = "ignore"


class StatusUpdateRequest(BaseModel):
    """Request to move a report to another lifecycle state."""
    status: ReportStatus = Field(..., description="New status value")


class CommentView(BaseModel):
    id: int
    user_id: int
    report_id: int
    content: str
    created_at: datetime
    user_name: str


class ReportResponse(BaseModel):
    """
    Model for report responses (what API returns).
    Joined with the reporter's name and the ward's name.
    """
    id: int
    user_id: int
    ward_id: int
    category: str
    urgency: Urgency
    status: ReportStatus
    description: Optional[str] = None
    lat: float
    lng: float
    image_urls: List[str] = Field(default_factory=list)
    created_at: datetime
    resolved_at: Optional[datetime] = Field(default=None, description="Set only while status is resolved")
    reporter_name: str
    ward_name: str


class ReportDetail(ReportResponse):
    comments: List[CommentView] = Field(default_factory=list)


class CreatedResponse(BaseModel):
    id: int
    message: str
