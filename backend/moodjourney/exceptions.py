"""
MoodJourney Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the handful of ways a request
       (or startup) can fail.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) catch these
       and return the JSON failure envelope with the matching status code.
Who:   Raised by services, config and the database gateway.

Exception Hierarchy:
    MoodJourneyError (base)
    ├── ValidationError     → 400 Bad Request (client can fix)
    ├── NotFoundError       → 404 Not Found (missing or soft-deleted row)
    ├── ConflictError       → 409 Conflict (username/email already taken)
    ├── InternalError       → 500 Internal Server Error
    └── FatalStartupError   → process exits (bad config, database unreachable)
"""

from typing import Any, Dict, Optional


class MoodJourneyError(Exception):
    """
    Base exception for all MoodJourney application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MoodJourneyError):
    """
    Raised when client input fails validation.

    When:    Unparsable body, empty username/email, mood rating outside [1, 10],
             malformed date filter.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(MoodJourneyError):
    """
    Raised when a requested resource does not exist.

    Soft-deleted rows count as missing. SQLAlchemy returns None for missing
    records; services convert that into this exception.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource[:1].upper()}{resource[1:]} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(MoodJourneyError):
    """
    Raised when an insert violates a uniqueness constraint.

    When:    Creating a user whose username or email is already taken.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalError(MoodJourneyError):
    """
    Raised when a database operation fails for any unclassified reason.

    HTTP:    500 Internal Server Error

    The message is phrased for the client ("Failed to create user"); the
    driver error is kept in context and only logged.
    """

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FatalStartupError(MoodJourneyError):
    """
    Raised when the service cannot start at all.

    When:    A required DB_* variable is unset, the database is unreachable,
             or table creation fails.
    Effect:  The entry point logs it and exits non-zero; there is no retry.
    """

    def __init__(
        self,
        message: str = "Startup failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
