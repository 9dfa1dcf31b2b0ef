"""
Community Service - cleanup events, RSVPs, volunteer points and comments.
"""

from typing import Dict, List
import logging

from fastapi import Depends
from sqlalchemy import func, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.settings import settings
from app.models.tables import (
    RSVP,
    CleanupEvent,
    Comment,
    Report,
    User,
    VolunteerProfile,
    Ward,
)
from app.models.user import CurrentUser

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 10

# Dialects with INSERT ... ON CONFLICT DO NOTHING
INSERT_IGNORE = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


class CommunityService:
    """Service for community engagement."""

    def __init__(self, db: Session, rsvp_points: int = 10):
        self.db = db
        self.rsvp_points = rsvp_points

    def list_events(self) -> List[Dict]:
        """Events in date order, each with its ward name and RSVP count."""
        rsvp_counts = (
            self.db.query(RSVP.event_id, func.count(RSVP.id).label("rsvp_count"))
            .group_by(RSVP.event_id)
            .subquery()
        )

        rows = (
            self.db.query(CleanupEvent, Ward.name, func.coalesce(rsvp_counts.c.rsvp_count, 0))
            .join(Ward, CleanupEvent.ward_id == Ward.id)
            .outerjoin(rsvp_counts, rsvp_counts.c.event_id == CleanupEvent.id)
            .order_by(CleanupEvent.date.asc(), CleanupEvent.id.asc())
            .all()
        )

        return [
            {
                "id": event.id,
                "ward_id": event.ward_id,
                "ward_name": ward_name,
                "title": event.title,
                "description": event.description,
                "date": event.date,
                "location": event.location,
                "rsvp_count": rsvp_count,
            }
            for event, ward_name, rsvp_count in rows
        ]

    def rsvp(self, event_id: int, user: CurrentUser) -> VolunteerProfile:
        """
        Record attendance and award volunteer points.

        Duplicate RSVPs and unknown events both surface as the same
        ConflictError; the store's constraints decide which rows are legal.

        Returns:
            The user's volunteer profile after the award
        """
        try:
            self.db.add(RSVP(user_id=user.id, event_id=event_id))
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"RSVP rejected for user {user.id}, event {event_id}")
            raise ConflictError("Already RSVPed or event not found")

        self._ensure_profile(user.id)
        self.db.execute(
            update(VolunteerProfile)
            .where(VolunteerProfile.user_id == user.id)
            .values(points=VolunteerProfile.points + self.rsvp_points)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

        profile = (
            self.db.query(VolunteerProfile)
            .populate_existing()
            .filter(VolunteerProfile.user_id == user.id)
            .one()
        )
        logger.info(f"RSVP recorded: user {user.id} → event {event_id}, points now {profile.points}")
        return profile

    def _ensure_profile(self, user_id: int) -> None:
        """
        Create the user's volunteer profile unless one exists.

        A concurrent first RSVP may insert the same row, so the insert ignores
        a user_id conflict instead of failing the caller's RSVP.
        """
        insert = INSERT_IGNORE.get(self.db.get_bind().dialect.name)
        if insert is not None:
            self.db.execute(
                insert(VolunteerProfile)
                .values(user_id=user_id, points=0, badge="Novice")
                .on_conflict_do_nothing(index_elements=["user_id"])
            )
            return

        exists = self.db.query(VolunteerProfile.id).filter(VolunteerProfile.user_id == user_id).first()
        if exists is None:
            self.db.add(VolunteerProfile(user_id=user_id, points=0))
            self.db.flush()

    def leaderboard(self) -> List[Dict]:
        rows = (
            self.db.query(User.name, VolunteerProfile.points, VolunteerProfile.badge)
            .join(User, VolunteerProfile.user_id == User.id)
            .order_by(VolunteerProfile.points.desc(), VolunteerProfile.id.asc())
            .limit(LEADERBOARD_SIZE)
            .all()
        )
        return [{"name": name, "points": points, "badge": badge} for name, points, badge in rows]

    def add_comment(self, report_id: int, content: str, user: CurrentUser) -> Comment:
        if not content or not content.strip():
            raise ValidationError("Comment content is required")

        if self.db.get(Report, report_id) is None:
            raise NotFoundError("Report not found")

        comment = Comment(user_id=user.id, report_id=report_id, content=content)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment


def get_community_service(db: Session = Depends(get_db)) -> CommunityService:
    return CommunityService(db, rsvp_points=settings.RSVP_POINTS)
