"""
Application errors raised by services and converted to results at the action boundary.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    BACKEND_ERROR = "BACKEND_ERROR"


class ActionError(Exception):
    """Base error carrying a stable code, a user-safe message and an HTTP status."""

    code: ErrorCode = ErrorCode.BACKEND_ERROR
    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequired(ActionError):
    code = ErrorCode.AUTHENTICATION_REQUIRED
    status_code = 401
    default_message = "You must be logged in"


class PermissionDenied(ActionError):
    code = ErrorCode.PERMISSION_DENIED
    status_code = 403
    default_message = "You don't have permission to modify this event"


class EventNotFound(ActionError):
    code = ErrorCode.NOT_FOUND
    status_code = 404
    default_message = "Event not found"

    def __init__(self, event_id: Optional[int] = None):
        super().__init__()
        self.event_id = event_id


class ValidationFailed(ActionError):
    code = ErrorCode.VALIDATION_ERROR
    status_code = 400
    default_message = "Invalid input"


class Conflict(ActionError):
    code = ErrorCode.CONFLICT
    status_code = 409
    default_message = "Resource already exists"


class BackendFailure(ActionError):
    code = ErrorCode.BACKEND_ERROR
    status_code = 500


STATUS_BY_CODE = {
    cls.code: cls.status_code
    for cls in (AuthenticationRequired, PermissionDenied, EventNotFound, ValidationFailed, Conflict, BackendFailure)
}
