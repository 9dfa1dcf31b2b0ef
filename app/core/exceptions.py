"""
Domain exceptions for Madurai Clean.

Services raise these; the handler registered in app.main converts each one
into an HTTP status and a JSON body of the form {"error": ..., "code": ...}.

Usage:
    from app.core.exceptions import NotFoundError

    if report is None:
        raise NotFoundError("Report not found")
"""

from typing import Any, Dict, Optional


class CivicError(Exception):
    """Base exception for all Madurai Clean errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(CivicError):
    """Malformed or out-of-range input"""

    status_code = 400

    def __init__(self, message: str = "Invalid input", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class UnauthorizedError(CivicError):
    """No bearer credential was presented"""

    status_code = 401

    def __init__(self, message: str = "Not logged in"):
        super().__init__(message, code="UNAUTHORIZED")


class ForbiddenError(CivicError):
    """Credential invalid or expired, or role not permitted for the action"""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, code="FORBIDDEN")


class InvalidCredentialError(CivicError):
    """Password did not match the stored hash"""

    status_code = 400

    def __init__(self, message: str = "Invalid password"):
        super().__init__(message, code="INVALID_CREDENTIAL")


class NotFoundError(CivicError):
    """Referenced entity does not exist"""

    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="NOT_FOUND")


class ConflictError(CivicError):
    """Uniqueness violation (duplicate email, duplicate RSVP)"""

    status_code = 409

    def __init__(self, message: str = "Conflict"):
        super().__init__(message, code="CONFLICT")


class DependencyFailure(CivicError):
    """Store or mail transport failed"""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, code="DEPENDENCY_FAILURE")
