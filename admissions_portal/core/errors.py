"""
Error taxonomy for the admissions engine.

Every failure the services raise is a PortalError subclass with a stable
`code`, so the API layer can report the specific kind instead of a generic
failure. Only StoreUnavailable is retryable.
"""

from typing import Any, Dict, Optional


class PortalError(Exception):
    code = "PORTAL_ERROR"
    status_code = 400
    retryable = False
    default_message = "Request could not be completed"

    def __init__(self, message: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        payload = {"error": self.code, "detail": self.message}
        if self.context:
            payload["context"] = self.context
        return payload


class DuplicateApplication(PortalError):
    code = "DUPLICATE_APPLICATION"
    status_code = 409
    default_message = "You have already applied for this course"


class QuotaExceeded(PortalError):
    code = "QUOTA_EXCEEDED"
    status_code = 409
    default_message = "You can only apply for a maximum of 2 courses per institution"


class IneligibleStudent(PortalError):
    code = "INELIGIBLE_STUDENT"
    status_code = 422
    default_message = "You do not meet the requirements for this course"


class InvalidTransition(PortalError):
    code = "INVALID_TRANSITION"
    status_code = 409
    default_message = "Application cannot move to the requested status"


class AcceptanceConflict(PortalError):
    code = "ACCEPTANCE_CONFLICT"
    status_code = 409
    default_message = "Another admission offer has already been accepted"


class NotFound(PortalError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class NotAdmitted(PortalError):
    code = "NOT_ADMITTED"
    status_code = 409
    default_message = "There are no admission offers to choose from"


class StoreUnavailable(PortalError):
    code = "STORE_UNAVAILABLE"
    status_code = 503
    retryable = True
    default_message = "The data store is temporarily unavailable, please retry"


class Unauthorized(PortalError):
    code = "UNAUTHORIZED"
    status_code = 403
    default_message = "You do not have permission to modify this resource"
