"""
Razorpay API adapter for settlement and refund operations.

This module provides the RazorpayAdapter class which encapsulates all
Razorpay API interactions. All Razorpay calls should go through this
adapter to ensure consistent error handling, timeouts and observability.

Features:
- Configurable timeout on all API calls
- Automatic error translation to domain exceptions
- Structured logging with timing metrics
- Thread-safe for use from Celery workers (a client per call)

Configuration (via settings):
- RAZORPAY_KEY_ID / RAZORPAY_KEY_SECRET: API credentials
- RAZORPAY_API_TIMEOUT_SECONDS: API call timeout (default: 10)

Amounts are always integer minor units (paise). Callers convert with
payments.services.settlement_calculator.to_minor_units().

Usage:
    from payments.adapters import RazorpayAdapter, TransferLeg

    result = RazorpayAdapter.transfer_payment_split(
        payment_id="pay_Y",
        transfers=[TransferLeg(account="acc_X", amount_minor=44000)],
    )
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import razorpay
import requests
from razorpay.errors import BadRequestError, GatewayError, ServerError
from django.conf import settings

from payments.exceptions import (
    RazorpayAPIUnavailableError,
    RazorpayConfigurationError,
    RazorpayError,
    RazorpayInvalidAccountError,
    RazorpayInvalidRequestError,
    RazorpayTimeoutError,
)

# The SDK raises these with the message only; the class names the error
SDK_ERROR_CODES = (
    (BadRequestError, "BAD_REQUEST_ERROR"),
    (GatewayError, "GATEWAY_ERROR"),
    (ServerError, "SERVER_ERROR"),
)


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class TransferLeg:
    """
    One destination of a split transfer or an order's transfer list.

    Attributes:
        account: Linked account id (acc_xxx)
        amount_minor: Amount in paise
        currency: ISO 4217 currency code
        notes: Key-value notes attached to the transfer
    """

    account: str
    amount_minor: int
    currency: str = "INR"
    notes: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.amount_minor <= 0:
            raise ValueError("amount_minor must be positive")
        if not self.account:
            raise ValueError("account is required")

    def to_payload(self) -> dict[str, Any]:
        return {
            "account": self.account,
            "amount": self.amount_minor,
            "currency": self.currency,
            "notes": self.notes,
        }


@dataclass
class TransferResult:
    """
    Result from Razorpay transfer operations.

    Attributes:
        id: Transfer ID (trf_xxx)
        amount_minor: Amount transferred in paise
        currency: Currency code
        destination_account: Recipient account id
        raw_response: Full Razorpay response (stored on the booking)
    """

    id: str
    amount_minor: int
    currency: str
    destination_account: str
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class OrderResult:
    """Result from Razorpay order creation."""

    id: str
    amount_minor: int
    currency: str
    status: str
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class RefundResult:
    """
    Result from Razorpay refund operations.

    Attributes:
        id: Refund ID (rfnd_xxx)
        amount_minor: Refunded amount in paise
        status: Refund status (pending, processed, failed)
        payment_id: Original payment ID
        raw_response: Full Razorpay response
    """

    id: str
    amount_minor: int
    status: str
    payment_id: str
    raw_response: dict[str, Any] = field(default_factory=dict)


def _as_dict(response: Any) -> dict[str, Any]:
    return dict(response) if isinstance(response, dict) else {"value": response}


# =============================================================================
# Adapter
# =============================================================================


class RazorpayAdapter:
    """
    Adapter for Razorpay API operations.

    All methods are classmethods - no instance state is maintained.
    Services hold a reference to this class and tests swap it for a mock
    (see PayoutService.set_razorpay_adapter).

    Operations:
    - transfer_payment_split: Route transfer on an already captured payment
    - create_order_with_transfers: Order whose capture triggers the transfers
    - refund_payment: Refund to the customer's original instrument
    - create_reverse_transfer: Move funds from a linked account back
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    @staticmethod
    def _get_client() -> razorpay.Client:
        """Build a Razorpay client from settings."""
        key_id = getattr(settings, "RAZORPAY_KEY_ID", "")
        key_secret = getattr(settings, "RAZORPAY_KEY_SECRET", "")
        if not key_id or not key_secret:
            raise RazorpayConfigurationError(
                "Razorpay API keys are not configured",
                razorpay_code="missing_credentials",
            )
        return razorpay.Client(auth=(key_id, key_secret))

    @staticmethod
    def _timeout() -> int:
        return getattr(settings, "RAZORPAY_API_TIMEOUT_SECONDS", 10)

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Core Operations
    # =========================================================================

    @classmethod
    def transfer_payment_split(
        cls,
        payment_id: str,
        transfers: list[TransferLeg],
    ) -> TransferResult:
        """
        Split an already captured payment to linked accounts.

        Args:
            payment_id: Captured payment to split (pay_xxx)
            transfers: Destinations; only the first one is reported back

        Returns:
            TransferResult for the first transfer, with the full collection
            response in raw_response

        Raises:
            RazorpayInvalidAccountError: Linked account rejected
            RazorpayInvalidRequestError: Invalid parameters
            RazorpayAPIUnavailableError / RazorpayTimeoutError: transient
        """
        logger = cls.get_logger()
        first = transfers[0]
        log_context = {
            "operation": "transfer_payment_split",
            "payment_id": payment_id,
            "destination_account": first.account,
            "amount_minor": first.amount_minor,
        }

        start_time = time.time()
        logger.info("Starting Razorpay operation", extra=log_context)

        try:
            client = cls._get_client()
            response = client.payment.transfer(
                payment_id,
                {"transfers": [leg.to_payload() for leg in transfers]},
                timeout=cls._timeout(),
            )
            items = response.get("items") or [response]
            transfer = items[0]

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "Razorpay operation completed",
                extra={
                    **log_context,
                    "transfer_id": transfer.get("id"),
                    "duration_ms": duration_ms,
                },
            )

            return TransferResult(
                id=transfer.get("id", ""),
                amount_minor=transfer.get("amount", first.amount_minor),
                currency=transfer.get("currency", first.currency),
                destination_account=transfer.get("recipient", first.account),
                raw_response=_as_dict(response),
            )

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_razorpay_error(e, log_context, duration_ms)
            raise

    @classmethod
    def create_order_with_transfers(
        cls,
        amount_minor: int,
        currency: str,
        transfers: list[TransferLeg],
        notes: dict[str, Any] | None = None,
    ) -> OrderResult:
        """
        Create an order for the full customer amount with Route transfers.

        Razorpay executes the transfers when the order's payment is captured.
        """
        logger = cls.get_logger()
        log_context = {
            "operation": "create_order_with_transfers",
            "amount_minor": amount_minor,
            "currency": currency,
            "transfer_count": len(transfers),
        }

        start_time = time.time()
        logger.info("Starting Razorpay operation", extra=log_context)

        try:
            client = cls._get_client()
            order = client.order.create(
                {
                    "amount": amount_minor,
                    "currency": currency,
                    "transfers": [leg.to_payload() for leg in transfers],
                    "notes": notes or {},
                },
                timeout=cls._timeout(),
            )

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "Razorpay operation completed",
                extra={
                    **log_context,
                    "order_id": order.get("id"),
                    "duration_ms": duration_ms,
                },
            )

            return OrderResult(
                id=order["id"],
                amount_minor=order.get("amount", amount_minor),
                currency=order.get("currency", currency),
                status=order.get("status", "created"),
                raw_response=_as_dict(order),
            )

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_razorpay_error(e, log_context, duration_ms)
            raise

    @classmethod
    def refund_payment(
        cls,
        payment_id: str,
        amount_minor: int,
        notes: dict[str, Any] | None = None,
    ) -> RefundResult:
        """
        Refund a captured payment to the customer's original instrument.

        Raises:
            RazorpayInvalidRequestError: Already refunded, amount too large
            RazorpayAPIUnavailableError / RazorpayTimeoutError: transient
        """
        logger = cls.get_logger()
        log_context = {
            "operation": "refund_payment",
            "payment_id": payment_id,
            "amount_minor": amount_minor,
        }

        start_time = time.time()
        logger.info("Starting Razorpay operation", extra=log_context)

        try:
            client = cls._get_client()
            refund = client.payment.refund(
                payment_id,
                {"amount": amount_minor, "notes": notes or {}},
                timeout=cls._timeout(),
            )

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "Razorpay operation completed",
                extra={
                    **log_context,
                    "refund_id": refund.get("id"),
                    "refund_status": refund.get("status"),
                    "duration_ms": duration_ms,
                },
            )

            return RefundResult(
                id=refund["id"],
                amount_minor=refund.get("amount", amount_minor),
                status=refund.get("status", "pending"),
                payment_id=refund.get("payment_id", payment_id),
                raw_response=_as_dict(refund),
            )

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_razorpay_error(e, log_context, duration_ms)
            raise

    @classmethod
    def create_reverse_transfer(
        cls,
        amount_minor: int,
        currency: str,
        source: str,
        destination: str,
        notes: dict[str, Any] | None = None,
    ) -> TransferResult:
        """
        Move funds from a linked account back to the platform account.

        Used to recover the owner's share when a booking is refunded.
        """
        logger = cls.get_logger()
        log_context = {
            "operation": "create_reverse_transfer",
            "source_account": source,
            "destination_account": destination,
            "amount_minor": amount_minor,
        }

        start_time = time.time()
        logger.info("Starting Razorpay operation", extra=log_context)

        try:
            client = cls._get_client()
            transfer = client.transfer.create(
                {
                    "amount": amount_minor,
                    "currency": currency,
                    "source": source,
                    "destination": destination,
                    "notes": notes or {},
                },
                timeout=cls._timeout(),
            )

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "Razorpay operation completed",
                extra={
                    **log_context,
                    "transfer_id": transfer.get("id"),
                    "duration_ms": duration_ms,
                },
            )

            return TransferResult(
                id=transfer["id"],
                amount_minor=transfer.get("amount", amount_minor),
                currency=transfer.get("currency", currency),
                destination_account=destination,
                raw_response=_as_dict(transfer),
            )

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_razorpay_error(e, log_context, duration_ms)
            raise

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_razorpay_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Razorpay SDK and transport exceptions to domain exceptions.

        Raises:
            RazorpayInvalidAccountError: Linked account rejected
            RazorpayInvalidRequestError: Invalid request parameters
            RazorpayAPIUnavailableError: 5xx or connection failure
            RazorpayTimeoutError: Request timed out
        """
        logger = cls.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, RazorpayError):
            # Already translated (configuration errors)
            logger.error(
                "Razorpay call not attempted",
                extra={**log_context, "error_code": error.error_code},
            )
            raise error

        razorpay_code = next(
            (code for error_class, code in SDK_ERROR_CODES if isinstance(error, error_class)),
            None,
        )
        message = str(error.args[0]) if error.args else str(error)

        if isinstance(error, BadRequestError):
            logger.error(
                "Invalid request to Razorpay",
                extra={**log_context, "razorpay_code": razorpay_code},
            )

            if "account" in message.lower():
                raise RazorpayInvalidAccountError(message, razorpay_code=razorpay_code)

            raise RazorpayInvalidRequestError(message, razorpay_code=razorpay_code)

        elif isinstance(error, requests.exceptions.Timeout):
            logger.error("Razorpay request timed out", extra=log_context)
            raise RazorpayTimeoutError(
                "Razorpay request timed out",
                razorpay_code="timeout",
            )

        elif isinstance(error, requests.exceptions.ConnectionError):
            logger.error(
                "Connection error to Razorpay",
                extra=log_context,
                exc_info=True,
            )
            raise RazorpayAPIUnavailableError(
                "Could not connect to Razorpay",
                razorpay_code="api_connection_error",
            )

        elif isinstance(error, (ServerError, GatewayError)):
            logger.error(
                "Razorpay API error",
                extra={**log_context, "razorpay_code": razorpay_code},
                exc_info=True,
            )
            raise RazorpayAPIUnavailableError(message, razorpay_code=razorpay_code)

        else:
            logger.error(
                f"Unexpected error from Razorpay: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise RazorpayAPIUnavailableError(
                f"Unexpected Razorpay error: {error}",
                razorpay_code="unknown_error",
            )
