"""
Base exception classes for application-wide error handling.

Every domain error carries a human-readable message, a machine-readable
error code and optional details, so that API views and Celery tasks report
failures in one shape.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Missing or malformed input (invalid-argument)
    ├── NotFoundError - Referenced record does not exist
    ├── PermissionDeniedError - Caller may not perform the action
    ├── ConflictError - Operation conflicts with current record state
    │   └── PreconditionFailedError - Record is not in the state the action needs
    └── ExternalServiceError - Third-party service failure (internal)

Usage:
    from core.exceptions import NotFoundError, PreconditionFailedError

    raise NotFoundError(
        "Refund request not found",
        details={"refund_request_id": str(refund_request_id)},
    )

    raise PreconditionFailedError("Refund request already processed")

Note:
    The HTTP status for each class is decided in core.exception_handler,
    not here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, ids, gateway codes)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Refund request not found",
                "error_code": "NOT_FOUND",
                "details": {"refund_request_id": "..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for service-layer checks such as missing identifiers or a
    non-positive amount. DRF serializer errors are reported by DRF itself.
    """

    default_error_code: str = "INVALID_ARGUMENT"


class NotFoundError(BaseApplicationError):
    """Raised when a requested record does not exist."""

    default_error_code: str = "NOT_FOUND"


class PermissionDeniedError(BaseApplicationError):
    """Raised when the caller lacks permission for an operation."""

    default_error_code: str = "PERMISSION_DENIED"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current record state.

    Use for:
    - Duplicate entries
    - Concurrent modification conflicts
    - Invalid state transitions
    """

    default_error_code: str = "CONFLICT"


class PreconditionFailedError(ConflictError):
    """
    Raised when a record is not in the state an action requires.

    Example:
        if refund_request.status != RefundRequestStatus.PENDING:
            raise PreconditionFailedError("Refund request already processed")
    """

    default_error_code: str = "FAILED_PRECONDITION"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Use for SMTP, push provider or payment processor outages that are not
    covered by a more specific payments exception. Log the original error;
    clients receive the message only.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
