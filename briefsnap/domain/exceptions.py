"""Domain exceptions for the BriefSnap service.

Defines domain-level exceptions for fetch failures, decode failures and
edge-function rejections. Presentation layer maps them to HTTP responses
in exception handlers.
"""

from typing import Any


class BriefSnapException(Exception):
    """Base exception for all BriefSnap application errors.

    Presentation layer maps these to HTTP responses using message,
    error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body: error code, message and details."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(BriefSnapException):
    """Raised when request input is missing or malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(BriefSnapException):
    """Raised when an ID token or shared secret is missing or invalid."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class ResourceNotFoundException(BriefSnapException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'article', 'location').
            resource_id: The identifier that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RateLimitExceededException(BriefSnapException):
    """Raised when a caller exceeds a per-user request window."""

    def __init__(
        self,
        message: str = "Too many requests. Please try again later.",
        retry_after: int | None = None,
    ) -> None:
        details = {"retry_after": retry_after} if retry_after is not None else {}
        super().__init__(message, "RATE_LIMITED", details)
        self.retry_after = retry_after


class FetchFailedException(BriefSnapException):
    """Raised when a live fetch (database or third-party API) fails.

    Never written to cache and never retried automatically by the caller.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        details = {"source": source} if source else {}
        super().__init__(message, "FETCH_FAILED", details)


class DecodeError(BriefSnapException):
    """Raised when a document or API payload fails the parse/validate step."""

    def __init__(self, kind: str, doc_id: str | None, reason: str) -> None:
        """Initialize with the payload kind, identifier and reason.

        Args:
            kind: Record kind (e.g. 'article', 'comment', 'weather').
            doc_id: Document or payload identifier, if known.
            reason: What was missing or malformed.
        """
        super().__init__(
            f"Malformed {kind} payload: {reason}",
            "DECODE_ERROR",
            {"kind": kind, "doc_id": doc_id, "reason": reason},
        )
        self.kind = kind
        self.doc_id = doc_id
        self.reason = reason


class ModerationUnavailableException(BriefSnapException):
    """Raised when the content-moderation API cannot be reached or fails."""

    def __init__(self) -> None:
        super().__init__(
            "Content moderation service unavailable", "MODERATION_UNAVAILABLE"
        )


class ServiceNotConfiguredException(BriefSnapException):
    """Raised when an operation needs a collaborator that is not configured."""

    def __init__(self, service: str) -> None:
        super().__init__(
            f"{service} is not configured",
            "SERVICE_UNAVAILABLE",
            {"service": service},
        )


class CalendarAuthorizationException(BriefSnapException):
    """Raised by the calendar gateway when the stored token is rejected.

    Handled inside CalendarService (token dropped, one re-authorization);
    never surfaced to HTTP callers.
    """

    def __init__(self, message: str = "Calendar authorization expired") -> None:
        super().__init__(message, "CALENDAR_AUTHORIZATION_ERROR")
