"""
Tests for the domain exception hierarchy.
"""

from core.exceptions import (
    ExternalServiceError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from payments.exceptions import (
    PaymentNotFoundError,
    PaymentPreconditionError,
    PaymentProcessingError,
    PaymentValidationError,
    RazorpayAPIUnavailableError,
    RazorpayInvalidRequestError,
)


class TestBaseApplicationError:
    def test_to_dict_omits_empty_details(self):
        error = NotFoundError("Refund request not found")

        assert error.to_dict() == {"error": "Refund request not found", "error_code": "NOT_FOUND"}

    def test_to_dict_with_details(self):
        error = ValidationError("Missing required parameters", details={"field": "amount"})

        assert error.to_dict()["details"] == {"field": "amount"}
        assert error.error_code == "INVALID_ARGUMENT"

    def test_explicit_error_code(self):
        error = ExternalServiceError("Failed to send email", error_code="EMAIL_DELIVERY_FAILED")

        assert str(error) == "[EMAIL_DELIVERY_FAILED] Failed to send email"


class TestPaymentErrors:
    def test_kinds(self):
        assert isinstance(PaymentValidationError("x"), ValidationError)
        assert isinstance(PaymentNotFoundError("x"), NotFoundError)
        assert isinstance(PaymentPreconditionError("x"), PreconditionFailedError)

    def test_gateway_errors_are_processing_errors(self):
        assert isinstance(RazorpayAPIUnavailableError("down"), PaymentProcessingError)

    def test_retryability(self):
        assert RazorpayAPIUnavailableError("down").is_retryable is True
        assert RazorpayInvalidRequestError("bad").is_retryable is False
