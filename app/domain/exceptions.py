"""Domain exceptions for the Duet application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class DuetException(Exception):
    """Base exception for all Duet application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

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
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DuetException):
    """Raised when input validation fails (malformed input, missing partner email, weak password)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DuetException):
    """Raised when authentication fails (e.g. invalid credentials or bearer token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(DuetException):
    """Raised when the acting identity does not match the resource or link it uses."""

    def __init__(self, message: str = "Not allowed", reason: str | None = None) -> None:
        """Initialize with message and optional machine-readable reason.

        Args:
            message: Human-readable message.
            reason: Optional reason code (e.g. 'role_mismatch', 'not_approved').
        """
        details = {"reason": reason} if reason else {}
        super().__init__(message, "UNAUTHORIZED", details)


class ResourceNotFoundException(DuetException):
    """Raised when a requested resource (account, request, link) is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str | None = None,
        message: str | None = None,
    ) -> None:
        """Initialize with resource type and optional id.

        The id is not echoed in the message so opaque tokens never leak into
        responses or logs.

        Args:
            resource_type: Type of resource (e.g. 'account', 'password_reset_request').
            resource_id: Optional id kept in details for non-secret identifiers.
            message: Optional human-readable override.
        """
        details: dict[str, Any] = {"resource_type": resource_type}
        if resource_id is not None:
            details["resource_id"] = resource_id
        super().__init__(
            message or f"{resource_type} not found",
            "NOT_FOUND",
            details,
        )


class AlreadyUsedException(DuetException):
    """Raised when a single-use code, token, or link has already been consumed."""

    def __init__(self, resource_type: str, message: str | None = None) -> None:
        super().__init__(
            message or f"{resource_type} has already been used",
            "ALREADY_USED",
            {"resource_type": resource_type},
        )


class ExpiredException(DuetException):
    """Raised when a code, token, or link is past its expiry."""

    def __init__(self, resource_type: str, message: str | None = None) -> None:
        super().__init__(
            message or f"{resource_type} has expired",
            "EXPIRED",
            {"resource_type": resource_type},
        )


class InvalidCodeException(DuetException):
    """Raised when a one-time code does not match the stored hash."""

    def __init__(self, message: str = "The verification code is incorrect") -> None:
        super().__init__(message, "INVALID_CODE")


class NotificationDeliveryException(DuetException):
    """Raised when an email that the flow cannot proceed without fails to send."""

    def __init__(self, purpose: str, message: str | None = None) -> None:
        """Initialize with the notification purpose.

        Args:
            purpose: What was being sent (e.g. 'password_reset_code').
            message: Optional human-readable override.
        """
        super().__init__(
            message or "Unable to deliver the email right now. Please try again shortly.",
            "DELIVERY_FAILED",
            {"purpose": purpose},
        )


class SqlNotConfiguredException(DuetException):
    """Raised when an operation requires the database but DATABASE_URL is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class CredentialException(DuetException):
    """Raised when decryption of a stored secret fails (wrong key or corrupted payload)."""

    def __init__(self, message: str = "Credential operation failed") -> None:
        super().__init__(message, "CREDENTIAL_ERROR")
