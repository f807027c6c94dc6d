"""
Application Errors
Standard error codes and the exceptions services raise

Routes never build error JSON by hand: raise an AppError subclass and the
exception handler registered in main.py renders the envelope
{"success": false, "error": {"message", "code", "details"}}.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes shared with the frontend (it branches on these, not on messages)."""
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"
    RATE_LIMIT = "RATE_LIMIT"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"
    SERVER_ERROR = "SERVER_ERROR"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"


ERROR_STATUS_MAP: Dict[ErrorCode, int] = {
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.VALIDATION: 400,
    ErrorCode.CONFLICT: 409,
    ErrorCode.RATE_LIMIT: 429,
    ErrorCode.ALREADY_PROCESSED: 409,
    ErrorCode.SERVER_ERROR: 500,
    ErrorCode.UPSTREAM_UNAVAILABLE: 500,
}


class AppError(Exception):
    """Base error carrying a code, a user-facing message and optional details."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_MAP.get(self.code, 500)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {
                "message": self.message,
                "code": self.code.value,
                "details": self.details,
            },
        }


class Unauthenticated(AppError):
    """No usable session or refresh material for the caller."""

    def __init__(self, message: str = "GitHub connection expired. Please log out and sign in again.", details: Optional[Any] = None):
        super().__init__(ErrorCode.UNAUTHENTICATED, message, details)


class UpstreamUnavailable(AppError):
    """A provider call failed in a way the run cannot absorb."""

    def __init__(self, message: str = "GitHub API is unavailable.", details: Optional[Any] = None):
        super().__init__(ErrorCode.UPSTREAM_UNAVAILABLE, message, details)


class StorageFailure(AppError):
    """A write or read against the managed store failed."""

    def __init__(self, message: str = "Database operation failed.", details: Optional[Any] = None):
        super().__init__(ErrorCode.SERVER_ERROR, message, details)


class ValidationFailed(AppError):
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(ErrorCode.VALIDATION, message, details)
