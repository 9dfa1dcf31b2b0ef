"""
Community endpoints - cleanup events, RSVPs, leaderboard and report comments.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from app.models.community import CommentCreate, EventResponse, LeaderboardEntry
from app.models.report import CreatedResponse
from app.models.user import CurrentUser
from app.services.community_service import CommunityService, get_community_service
from app.utils.security import get_current_user

router = APIRouter(prefix="/community", tags=["Community"])


@router.get("/events", response_model=List[EventResponse])
async def list_events(community: CommunityService = Depends(get_community_service)):
    """Cleanup events in date order, with ward name and RSVP count."""
    return community.list_events()


@router.post("/events/{event_id}/rsvp")
async def rsvp(
    event_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    community: CommunityService = Depends(get_community_service),
):
    """
    RSVP to an event and earn volunteer points.

    Raises:
        409: Already RSVPed or event not found
    """
    profile = community.rsvp(event_id, current_user)
    return {"message": "RSVP successful, points awarded!", "points": profile.points}


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def leaderboard(community: CommunityService = Depends(get_community_service)):
    """Top 10 volunteers by points."""
    return community.leaderboard()


@router.post("/comments", status_code=status.HTTP_201_CREATED, response_model=CreatedResponse)
async def add_comment(
    request: CommentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    community: CommunityService = Depends(get_community_service),
):
    comment = community.add_comment(request.report_id, request.content, current_user)
    return {"id": comment.id, "message": "Comment added"}
