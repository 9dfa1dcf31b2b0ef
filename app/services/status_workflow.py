"""
Status Workflow Engine - report lifecycle state machine.

RULES:
- Only ward officers and admins may change a report's status
- A ward officer may only act on reports in their own ward (ENFORCE_WARD_SCOPE)
- In strict mode, only the next forward state is accepted (no skipping, no going back)
- Re-applying the current status is a no-op
- resolved_at is stamped only on the move into RESOLVED; any other target clears it
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

from app.core.exceptions import ForbiddenError, ValidationError
from app.models.enums import OFFICER_ROLES, ReportStatus, UserRole
from app.models.user import CurrentUser

logger = logging.getLogger(__name__)


class StatusWorkflowEngine:
    """
    State machine over a report's status field.

    PENDING → VERIFIED → IN_PROGRESS → RESOLVED → CLOSED
    """

    # Allowed transitions map: {from_status: [to_status, ...]}
    ALLOWED_TRANSITIONS: Dict[ReportStatus, List[ReportStatus]] = {
        ReportStatus.PENDING: [ReportStatus.VERIFIED],
        ReportStatus.VERIFIED: [ReportStatus.IN_PROGRESS],
        ReportStatus.IN_PROGRESS: [ReportStatus.RESOLVED],
        ReportStatus.RESOLVED: [ReportStatus.CLOSED],
        ReportStatus.CLOSED: [],  # Terminal state
    }

    def __init__(self, strict: bool = True, enforce_ward_scope: bool = True):
        self.strict = strict
        self.enforce_ward_scope = enforce_ward_scope

    @classmethod
    def is_valid_transition(cls, from_status: str, to_status: str) -> bool:
        """
        Check if a status transition is valid under the strict table.

        Args:
            from_status: Current status
            to_status: Desired new status

        Returns:
            True if transition is allowed, False otherwise
        """
        try:
            from_enum = ReportStatus(from_status)
            to_enum = ReportStatus(to_status)
        except ValueError:
            return False

        if from_enum == to_enum:
            return True

        return to_enum in cls.ALLOWED_TRANSITIONS.get(from_enum, [])

    @classmethod
    def get_allowed_transitions(cls, current_status: str) -> List[str]:
        try:
            current_enum = ReportStatus(current_status)
        except ValueError:
            return []
        return [s.value for s in cls.ALLOWED_TRANSITIONS.get(current_enum, [])]

    def authorize(self, actor: CurrentUser, report_ward_id: Optional[int] = None) -> None:
        """
        Raise ForbiddenError unless the actor may change this report's status.

        Admins may act on any ward. Ward officers are limited to their own
        ward when ward scope is enforced and the report's ward is given.
        """
        if actor.role not in OFFICER_ROLES:
            raise ForbiddenError("Only officers can update status")

        if (
            self.enforce_ward_scope
            and report_ward_id is not None
            and actor.role == UserRole.WARD_OFFICER
            and actor.ward_id != report_ward_id
        ):
            raise ForbiddenError("Ward officers can only update reports in their own ward")

    def validate(self, current_status: str, new_status: str) -> None:
        """Raise ValidationError if the move is illegal in strict mode."""
        if not self.strict:
            return

        if not self.is_valid_transition(current_status, new_status):
            allowed = self.get_allowed_transitions(current_status)
            raise ValidationError(
                f"Invalid status transition: {current_status} → {new_status}. "
                f"Allowed transitions from {current_status}: {allowed}",
                details={"from": current_status, "to": new_status, "allowed": allowed},
            )

    @staticmethod
    def resolved_at_for(new_status: str, now: Optional[datetime] = None) -> Optional[datetime]:
        """Resolution timestamp to store alongside new_status."""
        if ReportStatus(new_status) == ReportStatus.RESOLVED:
            return now or datetime.now(timezone.utc)
        return None
