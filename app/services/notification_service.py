"""
Notification Service - in-app alerts for ward officers.
"""

from typing import Dict, List
import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.exceptions import NotFoundError
from app.models.enums import UserRole
from app.models.tables import Notification, Report, User
from app.models.user import CurrentUser

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 50


def build_officer_message(category: str, description: str) -> str:
    preview = (description or "")[:PREVIEW_LENGTH]
    return f"New {category} report in your ward: {preview}..."


class NotificationService:
    """Service for per-user notifications."""

    def __init__(self, db: Session):
        self.db = db

    def notify_ward_officers(self, report: Report) -> List[User]:
        """
        Queue one unread notification for every ward officer of the report's ward.

        Rows are added to the session; the caller commits.

        Returns:
            The officers that were notified (used for the email fan-out)
        """
        officers = (
            self.db.query(User)
            .filter(User.role == UserRole.WARD_OFFICER, User.ward_id == report.ward_id)
            .all()
        )

        message = build_officer_message(report.category, report.description)
        for officer in officers:
            self.db.add(Notification(user_id=officer.id, message=message))

        logger.info(f"Queued {len(officers)} officer notification(s) for report in ward {report.ward_id}")
        return officers

    def list_for_user(self, user: CurrentUser) -> List[Dict]:
        rows = (
            self.db.query(Notification)
            .filter(Notification.user_id == user.id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )
        return [
            {
                "id": n.id,
                "user_id": n.user_id,
                "message": n.message,
                "read_status": n.read_status,
                "created_at": n.created_at,
            }
            for n in rows
        ]

    def mark_read(self, notification_id: int, user: CurrentUser) -> None:
        """Mark one of the caller's notifications as read."""
        updated = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user.id)
            .update({Notification.read_status: True}, synchronize_session=False)
        )
        if not updated:
            raise NotFoundError("Notification not found")
        self.db.commit()


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)
