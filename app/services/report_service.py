"""
Report service - business logic for the report lifecycle.

Flow on creation:
1. Store the report with status forced to pending (primary action, committed first)
2. Notify every ward officer of the report's ward (in-app notification rows)
3. Queue emails to the officers and a confirmation to the reporter (best-effort,
   sent by BackgroundTasks after the response has gone out)

IMPORTANT: If email fails, the report and its notifications are still stored
and the caller still gets a success response.
"""

from typing import Dict, List, Optional
import logging

from fastapi import BackgroundTasks, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.config.database import get_db
from app.core.exceptions import DependencyFailure, NotFoundError, ValidationError
from app.core.settings import settings
from app.models.enums import ReportStatus
from app.models.report import ReportCreate
from app.models.tables import Comment, Report, User, Ward
from app.models.user import CurrentUser
from app.services.email_service import Mailer, get_mailer
from app.services.notification_service import NotificationService
from app.services.status_workflow import StatusWorkflowEngine

logger = logging.getLogger(__name__)


def serialize_report(report: Report) -> Dict:
    """Flatten a report row joined with reporter and ward names."""
    return {
        "id": report.id,
        "user_id": report.user_id,
        "ward_id": report.ward_id,
        "category": report.category,
        "urgency": report.urgency.value,
        "status": report.status.value,
        "description": report.description,
        "lat": report.lat,
        "lng": report.lng,
        "image_urls": list(report.image_urls or []),
        "created_at": report.created_at,
        "resolved_at": report.resolved_at,
        "reporter_name": report.reporter.name if report.reporter else "",
        "ward_name": report.ward.name if report.ward else "",
    }


def email_payload(report: Report) -> Dict:
    return {
        "category": report.category,
        "urgency": report.urgency.value,
        "description": report.description,
        "lat": report.lat,
        "lng": report.lng,
        "ward_name": report.ward.name if report.ward else "",
    }


class ReportService:
    """
    Report lifecycle engine: creation with officer fan-out, status
    transitions, listing and email copies.
    """

    def __init__(self, db: Session, mailer: Mailer, workflow: Optional[StatusWorkflowEngine] = None):
        self.db = db
        self.mailer = mailer
        self.workflow = workflow or StatusWorkflowEngine(
            strict=settings.STRICT_STATUS_TRANSITIONS,
            enforce_ward_scope=settings.ENFORCE_WARD_SCOPE,
        )
        self.notifications = NotificationService(db)

    def _get_report(self, report_id: int) -> Report:
        report = (
            self.db.query(Report)
            .options(joinedload(Report.reporter), joinedload(Report.ward))
            .filter(Report.id == report_id)
            .first()
        )
        if report is None:
            raise NotFoundError("Report not found")
        return report

    def create_report(
        self,
        report_data: ReportCreate,
        creator: CurrentUser,
        background_tasks: BackgroundTasks,
    ) -> Report:
        """
        Create a new citizen report.

        Args:
            report_data: Validated report fields (any client status is ignored)
            creator: Authenticated caller
            background_tasks: Request-scoped queue the emails are added to

        Returns:
            The stored report
        """
        ward = self.db.get(Ward, report_data.ward_id)
        if ward is None:
            raise NotFoundError(f"Ward {report_data.ward_id} not found")

        report = Report(
            user_id=creator.id,
            ward_id=report_data.ward_id,
            category=report_data.category,
            urgency=report_data.urgency,
            status=ReportStatus.PENDING,
            description=report_data.description,
            lat=report_data.lat,
            lng=report_data.lng,
            image_urls=report_data.image_urls or [],
        )

        try:
            self.db.add(report)
            self.db.flush()
            officers = self.notifications.notify_ward_officers(report)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Report creation failed: {e}", exc_info=True)
            raise DependencyFailure("Failed to create report")

        self.db.refresh(report)
        logger.info(f"✅ Report {report.id} created in ward {report.ward_id} ({report.category}, {report.urgency.value})")

        self._queue_creation_emails(report, officers, background_tasks)
        return report

    def _queue_creation_emails(
        self, report: Report, officers: List[User], background_tasks: BackgroundTasks
    ) -> None:
        payload = email_payload(report)

        reporter = self.db.get(User, report.user_id)
        if reporter and reporter.email:
            background_tasks.add_task(
                self.mailer.send_report_email,
                reporter.email, f"Report Confirmation: {report.category}", payload
            )

        for officer in officers:
            if officer.email:
                background_tasks.add_task(
                    self.mailer.send_report_email,
                    officer.email, f"New Civic Report in Your Ward: {report.category}", payload
                )

    def set_status(self, report_id: int, new_status: ReportStatus, actor: CurrentUser) -> None:
        """
        Move a report to new_status.

        Raises:
            ForbiddenError: actor is not an officer, or is outside the report's ward
            NotFoundError: report does not exist
            ValidationError: illegal transition in strict mode
        """
        # Role check first so non-officers cannot probe report ids
        self.workflow.authorize(actor)

        report = self._get_report(report_id)
        self.workflow.authorize(actor, report.ward_id)

        current = report.status.value
        target = ReportStatus(new_status).value
        self.workflow.validate(current, target)

        if current == target and self.workflow.strict:
            logger.info(f"Report {report_id} already {target}; nothing to do")
            return

        report.status = ReportStatus(target)
        report.resolved_at = self.workflow.resolved_at_for(target)

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Status update failed for report {report_id}: {e}", exc_info=True)
            raise DependencyFailure("Update failed")

        logger.info(f"Report {report_id}: {current} → {target} by user {actor.id} ({actor.role.value})")

    def list_reports(
        self,
        ward_id: Optional[int] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Dict]:
        """Filtered list, newest first."""
        query = self.db.query(Report).options(joinedload(Report.reporter), joinedload(Report.ward))

        if ward_id is not None:
            query = query.filter(Report.ward_id == ward_id)
        if status:
            try:
                query = query.filter(Report.status == ReportStatus(status))
            except ValueError:
                raise ValidationError(f"Unknown status: {status}")
        if category:
            query = query.filter(Report.category == category)

        reports = query.order_by(Report.created_at.desc(), Report.id.desc()).all()
        return [serialize_report(r) for r in reports]

    def get_report_detail(self, report_id: int) -> Dict:
        """Report plus its comments, oldest comment first."""
        report = self._get_report(report_id)

        comments = (
            self.db.query(Comment)
            .options(joinedload(Comment.author))
            .filter(Comment.report_id == report_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .all()
        )

        detail = serialize_report(report)
        detail["comments"] = [
            {
                "id": c.id,
                "user_id": c.user_id,
                "report_id": c.report_id,
                "content": c.content,
                "created_at": c.created_at,
                "user_name": c.author.name if c.author else "",
            }
            for c in comments
        ]
        return detail

    def send_report_copy(
        self, report_id: int, caller: CurrentUser, background_tasks: BackgroundTasks
    ) -> None:
        """Queue a copy of the report to the caller's stored address."""
        report = self._get_report(report_id)

        user = self.db.get(User, caller.id)
        if user is None or not user.email:
            raise ValidationError("User email not found")

        background_tasks.add_task(
            self.mailer.send_report_email,
            user.email, f"Report Copy: {report.category}", email_payload(report)
        )


def get_report_service(
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> ReportService:
    return ReportService(db, mailer)
