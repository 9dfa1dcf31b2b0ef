"""
Report endpoints - citizen report submission, retrieval and lifecycle.
"""

from typing import List, Optional
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from app.models.report import (
    CreatedResponse,
    ReportCreate,
    ReportDetail,
    ReportResponse,
    StatusUpdateRequest,
)
from app.models.user import CurrentUser
from app.services.report_service import ReportService, get_report_service
from app.utils.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("", response_model=List[ReportResponse])
async def list_reports(
    ward_id: Optional[int] = Query(None, description="Filter by ward"),
    status: Optional[str] = Query(None, description="Filter by status"),
    category: Optional[str] = Query(None, description="Filter by category"),
    reports: ReportService = Depends(get_report_service),
):
    """List reports, newest first."""
    return reports.list_reports(ward_id=ward_id, status=status, category=category)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CreatedResponse)
async def submit_report(
    report: ReportCreate,
    background_tasks: BackgroundTasks,
    current_user: CurrentUser = Depends(get_current_user),
    reports: ReportService = Depends(get_report_service),
):
    """
    Submit a new citizen report.

    This endpoint:
    1. Stores the report with status pending
    2. Notifies the ward officers of the report's ward
    3. Queues emails to the officers and the reporter; they are sent after
       the response, and a failed send never fails the request
    """
    logger.info(f"📝 POST /reports - ward={report.ward_id}, category={report.category}, user={current_user.id}")
    created = reports.create_report(report, current_user, background_tasks)
    return {"id": created.id, "message": "Report created"}


@router.get("/{report_id}", response_model=ReportDetail)
async def get_report(report_id: int, reports: ReportService = Depends(get_report_service)):
    """Report with its comments in posting order."""
    return reports.get_report_detail(report_id)


@router.patch("/{report_id}/status")
async def change_status(
    report_id: int,
    request: StatusUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    reports: ReportService = Depends(get_report_service),
):
    """
    Change report status.

    **Status Meanings:**
    - pending: Filed, awaiting triage
    - verified: Officer confirmed the issue
    - in_progress: Cleanup underway
    - resolved: Work complete (resolution time recorded)
    - closed: Final state

    Does not return the report; re-fetch it to see the change.

    Raises:
        403: Caller is not a ward officer/admin, or is outside the report's ward
        404: Report not found
        400: Invalid status transition
    """
    reports.set_status(report_id, request.status, current_user)
    return {"message": "Status updated"}


@router.post("/{report_id}/send-email")
async def send_report_email(
    report_id: int,
    background_tasks: BackgroundTasks,
    current_user: CurrentUser = Depends(get_current_user),
    reports: ReportService = Depends(get_report_service),
):
    """Email a copy of the report to the caller. The send happens after the response."""
    reports.send_report_copy(report_id, current_user, background_tasks)
    return {"message": "Email sent successfully"}
