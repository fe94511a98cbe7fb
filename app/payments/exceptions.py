"""
Payment-specific exceptions for settlement and refund operations.

This module provides a hierarchy of exceptions for payment operations,
including payment domain errors and Razorpay-specific errors.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PaymentNotFoundError - Booking / refund request lookup failures (404)
    ├── PaymentValidationError - Missing or invalid input (400)
    ├── PaymentPreconditionError - Record not in the required state (409)
    └── PaymentProcessingError - Gateway processing failures (500)
        └── RazorpayError - Base for all Razorpay errors
            ├── RazorpayInvalidRequestError - Invalid request params (permanent)
            ├── RazorpayInvalidAccountError - Linked account rejected (permanent)
            ├── RazorpayConfigurationError - API keys not configured (permanent)
            ├── RazorpayAPIUnavailableError - API unavailable (transient)
            └── RazorpayTimeoutError - Request timeout (transient)

Usage:
    from payments.exceptions import PaymentNotFoundError, RazorpayError

    raise PaymentNotFoundError(
        "Refund request not found",
        details={"refund_request_id": str(refund_request_id)},
    )

    try:
        RazorpayAdapter.refund_payment(payment_id, amount_paise)
    except RazorpayError as e:
        if e.is_retryable:
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """
    Base exception for all payment operations.

    All payment-specific exceptions inherit from this class, which itself
    inherits from BaseApplicationError for consistent API error responses.
    """

    default_error_code: str = "PAYMENT_ERROR"


class PaymentNotFoundError(PaymentError, NotFoundError):
    """
    Raised when a payment entity cannot be found.

    Use for:
    - Booking lookup fails
    - RefundRequest lookup fails

    Example:
        refund_request = RefundRequest.objects.filter(id=request_id).first()
        if not refund_request:
            raise PaymentNotFoundError("Refund request not found")
    """

    default_error_code: str = "NOT_FOUND"


class PaymentValidationError(PaymentError, ValidationError):
    """
    Raised when payment input validation fails.

    Use for:
    - Missing booking, user or payment identifiers
    - Invalid (negative or non-numeric) amounts
    - Unknown admin action
    """

    default_error_code: str = "INVALID_ARGUMENT"


class PaymentPreconditionError(PaymentError, PreconditionFailedError):
    """
    Raised when a payment record is not in the state an action needs.

    Example:
        if refund_request.status != RefundRequestStatus.PENDING:
            raise PaymentPreconditionError("Refund request already processed")
    """

    default_error_code: str = "FAILED_PRECONDITION"


class PaymentProcessingError(PaymentError):
    """
    Raised when payment processing fails.

    Surfaced to API callers as an internal error. The message carries the
    gateway reason so the admin console can show it.
    """

    default_error_code: str = "INTERNAL"


# =============================================================================
# Razorpay-Specific Exceptions
# =============================================================================


class RazorpayError(PaymentProcessingError):
    """
    Base exception for all Razorpay-related errors.

    Attributes:
        razorpay_code: Razorpay's error code from the response body, if any
        is_retryable: True for transient failures (network, 5xx)

    The payout task does not retry on its own; is_retryable only tells the
    operator whether re-driving a failed booking is likely to help.
    """

    default_error_code: str = "RAZORPAY_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        razorpay_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if razorpay_code:
            details["razorpay_code"] = razorpay_code
        super().__init__(message, error_code=error_code, details=details)
        self.razorpay_code = razorpay_code


class RazorpayInvalidRequestError(RazorpayError):
    """
    Raised when Razorpay rejects the request parameters (HTTP 400).

    Common causes: amount exceeds the captured amount, payment already
    refunded, transfer already reversed.
    """

    default_error_code: str = "RAZORPAY_INVALID_REQUEST"
    is_retryable: bool = False


class RazorpayInvalidAccountError(RazorpayError):
    """
    Raised when the linked account id is unknown or not activated for Route.

    The owner has to fix their account id before the payout can settle.
    """

    default_error_code: str = "RAZORPAY_INVALID_ACCOUNT"
    is_retryable: bool = False


class RazorpayConfigurationError(RazorpayError):
    """Raised when RAZORPAY_KEY_ID / RAZORPAY_KEY_SECRET are not configured."""

    default_error_code: str = "RAZORPAY_NOT_CONFIGURED"
    is_retryable: bool = False


class RazorpayAPIUnavailableError(RazorpayError):
    """Raised on Razorpay 5xx responses and connection failures."""

    default_error_code: str = "RAZORPAY_UNAVAILABLE"
    is_retryable: bool = True


class RazorpayTimeoutError(RazorpayError):
    """
    Raised when a Razorpay request times out.

    The operation may or may not have completed on Razorpay's side; check
    the dashboard before re-driving a transfer.
    """

    default_error_code: str = "RAZORPAY_TIMEOUT"
    is_retryable: bool = True
