"""
Feedback Service - citizen ratings of how issues were handled.
"""

from typing import Dict, List, Optional
import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models.tables import Feedback, Report, User
from app.models.user import CurrentUser

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class FeedbackService:

    def __init__(self, db: Session):
        self.db = db

    def submit(
        self,
        rating: Optional[int],
        user: CurrentUser,
        comments: Optional[str] = None,
        report_id: Optional[int] = None,
    ) -> Feedback:
        """
        Store a 1-5 rating, optionally tied to a report.

        The report's status is not checked; feedback may be attached to a
        report in any state, or to none.
        """
        if rating is None or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError("Rating must be between 1 and 5")

        if report_id is not None and self.db.get(Report, report_id) is None:
            raise NotFoundError("Report not found")

        feedback = Feedback(
            user_id=user.id,
            report_id=report_id,
            rating=rating,
            comments=comments or None,
        )
        self.db.add(feedback)
        self.db.commit()
        self.db.refresh(feedback)

        logger.info(f"Feedback {feedback.id} submitted by user {user.id} (rating {rating})")
        return feedback

    def list_all(self, caller: CurrentUser) -> List[Dict]:
        """All feedback, newest first. Officers and admins only."""
        if not caller.is_officer:
            raise ForbiddenError("Unauthorized")

        rows = (
            self.db.query(Feedback, User.name, Report.category)
            .join(User, Feedback.user_id == User.id)
            .outerjoin(Report, Feedback.report_id == Report.id)
            .order_by(Feedback.created_at.desc(), Feedback.id.desc())
            .all()
        )

        return [
            {
                "id": f.id,
                "user_id": f.user_id,
                "report_id": f.report_id,
                "rating": f.rating,
                "comments": f.comments,
                "created_at": f.created_at,
                "user_name": user_name,
                "report_category": category,
            }
            for f, user_name, category in rows
        ]


def get_feedback_service(db: Session = Depends(get_db)) -> FeedbackService:
    return FeedbackService(db)
