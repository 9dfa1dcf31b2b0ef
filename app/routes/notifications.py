"""
Notification endpoints - the caller's own in-app alerts.
"""

from typing import List

from fastapi import APIRouter, Depends

from app.models.community import NotificationResponse
from app.models.user import CurrentUser
from app.services.notification_service import NotificationService, get_notification_service
from app.utils.security import get_current_user

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    current_user: CurrentUser = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    """Own notifications, newest first."""
    return notifications.list_for_user(current_user)


@router.patch("/{notification_id}/read")
async def mark_read(
    notification_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
):
    """
    Mark one of the caller's notifications as read.

    Raises:
        404: No such notification owned by the caller
    """
    notifications.mark_read(notification_id, current_user)
    return {"message": "Notification marked as read"}
