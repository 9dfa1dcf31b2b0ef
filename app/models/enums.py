"""
Shared enumerations for users and reports.
Values are the exact strings stored in the database and exchanged over JSON.
"""

from enum import Enum


class UserRole(str, Enum):
    """Who a user is on the platform."""
    CITIZEN = "citizen"
    VOLUNTEER = "volunteer"
    WARD_OFFICER = "ward_officer"
    ADMIN = "admin"


# Roles allowed to triage reports and read feedback
OFFICER_ROLES = frozenset({UserRole.WARD_OFFICER, UserRole.ADMIN})


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ReportStatus(str, Enum):
    """
    Report lifecycle, in order:
    PENDING → VERIFIED → IN_PROGRESS → RESOLVED → CLOSED
    """
    PENDING = "pending"            # Initial state, set at creation
    VERIFIED = "verified"          # Officer confirmed the issue exists
    IN_PROGRESS = "in_progress"    # Cleanup crew assigned
    RESOLVED = "resolved"          # Work done, resolution timestamp stamped
    CLOSED = "closed"              # Terminal


# Suggested categories shown by the client; category itself is free-form
SUGGESTED_CATEGORIES = (
    "Garbage Pile",
    "Clogged Drain",
    "Illegal Dumping",
    "Overflowing Bin",
    "Dead Animal",
    "Public Toilet",
    "Other",
)
