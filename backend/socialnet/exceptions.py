"""
SocialNet Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a user-facing message and an optional context
       dict. Services raise them; the global handlers registered in main.py
       turn them into the JSON error envelope with the matching status code.

Exception Hierarchy:
    SocialNetError (base)               → 500
    ├── ValidationError                 → 400 Bad Request
    ├── ConflictError                   → 400 Bad Request (duplicate account data)
    ├── AuthenticationError             → 401 Unauthorized
    ├── NotFoundError                   → 404 Not Found
    ├── RateLimitExceededError          → 429 Too Many Requests
    └── DatabaseError                   → 500 Internal Server Error
"""

from typing import Any, Dict, Optional

UNAUTHORIZED_MESSAGE = "Unauthorized access"
REQUEST_FORMAT_ERROR = "Request format error"


class SocialNetError(Exception):
    """
    Base exception for all SocialNet application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, never returned verbatim for 5xx)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SocialNetError):
    """
    Raised when client input breaks a business rule the schemas cannot express,
    e.g. comment content that is blank once trimmed.

    The message is always prefixed with "Request format error".
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        detail: Optional[str] = None,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{REQUEST_FORMAT_ERROR}: {detail}" if detail else REQUEST_FORMAT_ERROR
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(SocialNetError):
    """Raised when a username or email is already registered."""

    status_code = 400
    error_code = "conflict"

    def __init__(
        self,
        message: str = "Account already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(SocialNetError):
    """
    Raised for a missing/invalid bearer token, a wrong password, or an attempt
    to modify content owned by another user.
    """

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = UNAUTHORIZED_MESSAGE,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(SocialNetError):
    """
    Raised when a requested resource does not exist.

    The service layer converts SQLAlchemy's `None` results into this exception;
    the message is the canonical one for the resource ("Post does not exist").
    """

    status_code = 404
    error_code = "not_found"

    MESSAGES = {
        "user": "Account does not exist",
        "post": "Post does not exist",
        "comment": "Comment does not exist",
    }

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = self.MESSAGES.get(resource, f"The requested {resource} was not found")
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource


class DatabaseError(SocialNetError):
    """
    Raised when a database operation fails unexpectedly.

    The message returned to the client is always generic; the original error
    type goes into `context` and the server log only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(SocialNetError):
    """Raised when a client exceeds the per-IP request rate limit."""

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message="Too many requests, please try again later", context=ctx)
        self.retry_after = retry_after
