"""
Refund service for booking cancellations.

Two operations:

create_request:
    A customer cancels a booking. A RefundRequest is stored in PENDING, the
    booking is marked cancelled and the admin is notified.

process_request (admin):
    reject: PENDING -> REJECTED and the customer is notified.
    approve: PENDING -> APPROVED under a row lock, then
        1. Best effort: reverse-transfer the ticket price from the owner's
           linked account to the platform account. Any failure here is
           logged and the refund continues.
        2. Refund the full amount the customer paid.
        3. APPROVED -> PROCESSED with the refund id and breakdown, booking
           updated, customer notified.
        If step 2 fails: APPROVED -> FAILED, and PaymentProcessingError is
        raised. The request then needs an admin.

Usage:
    from payments.services import RefundService

    result = RefundService.process_request(refund_request_id, "approve", "ok")
    result.refund_id
    result.breakdown.to_dict()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone

from authentication.models import User
from core.services import BaseService
from movies.models import BookingStatus, MovieBooking
from notifications import catalog
from notifications.services import NotificationService

from payments.adapters import RazorpayAdapter
from payments.exceptions import (
    PaymentNotFoundError,
    PaymentPreconditionError,
    PaymentProcessingError,
    PaymentValidationError,
    RazorpayError,
)
from payments.models import RefundRequest
from payments.models.refund_request import DEFAULT_REFUND_REASON
from payments.services.account_resolver import AccountResolver
from payments.services.settlement_calculator import (
    SettlementCalculator,
    display_amount,
    to_amount,
    to_minor_units,
)
from payments.state_machines import RefundAction, RefundRequestStatus

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Constants
# =============================================================================

REQUEST_SUBMITTED_MESSAGE = (
    "BookMyBiz movie booking refund request submitted successfully. "
    "Admin will review and process your refund within 24-48 hours."
)
REQUEST_REJECTED_MESSAGE = "Refund request rejected"
REFUND_PROCESSED_MESSAGE = "Refund processed successfully"
RECOVERY_PURPOSE = "Refund recovery for movie booking cancellation"


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CreateRefundRequestParams:
    """Input of a customer refund request (camelCase in the API)."""

    booking_id: Any
    user_id: Any
    amount: Any
    payment_id: str | None
    theatre_id: Any = None
    reason: str | None = None
    show_date: str = ""
    movie_title: str = ""
    theatre_name: str = ""
    selected_seats: list = field(default_factory=list)


@dataclass
class RefundRequestCreated:
    refund_request: RefundRequest
    message: str = REQUEST_SUBMITTED_MESSAGE


@dataclass
class RecoveryOutcome:
    """
    Result of trying to pull the ticket price back from the owner.

    attempted is False when no linked account could be resolved.
    """

    attempted: bool = False
    recovered: bool = False
    transfer_id: str | None = None
    error: str | None = None


@dataclass
class RefundBreakdown:
    total_amount: Decimal
    actual_ticket_price: Decimal
    platform_amount: Decimal
    ticket_price_is_estimated: bool
    recovery: RecoveryOutcome

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe breakdown stored on the request and returned to the admin."""
        return {
            "totalAmount": str(self.total_amount),
            "actualTicketPrice": str(self.actual_ticket_price),
            "platformAmount": str(self.platform_amount),
            "ticketPriceIsEstimated": self.ticket_price_is_estimated,
            "theatreOwnerRecovered": self.recovery.recovered,
            "theatreOwnerRefundId": self.recovery.transfer_id,
        }


@dataclass
class ProcessRefundResult:
    refund_request: RefundRequest
    message: str
    refund_id: str | None = None
    breakdown: RefundBreakdown | None = None


# =============================================================================
# Refund Service
# =============================================================================


class RefundService(BaseService):
    """
    Service for customer refund requests.

    Error Handling:
        - Missing input: PaymentValidationError (invalid-argument)
        - Unknown request/booking/user: PaymentNotFoundError
        - Request not pending: PaymentPreconditionError
        - Refund call failed: PaymentProcessingError (internal)
        - Owner recovery failed: logged, refund continues
    """

    # Razorpay adapter - can be injected for testing
    _razorpay_adapter: type | None = None

    @classmethod
    def get_razorpay_adapter(cls) -> type:
        """Get the Razorpay adapter class."""
        return cls._razorpay_adapter or RazorpayAdapter

    @classmethod
    def set_razorpay_adapter(cls, adapter: type | None) -> None:
        """Set the Razorpay adapter class (for testing)."""
        cls._razorpay_adapter = adapter

    # =========================================================================
    # Request creation
    # =========================================================================

    @classmethod
    def create_request(cls, params: CreateRefundRequestParams) -> RefundRequestCreated:
        """
        Store a refund request and cancel the booking.

        Raises:
            PaymentValidationError: booking, user, amount or payment id missing,
                theatre does not match the booking
            PaymentNotFoundError: booking or user does not exist
            PaymentPreconditionError: booking already has an open request
        """
        if not (params.booking_id and params.user_id and params.amount and params.payment_id):
            raise PaymentValidationError("Missing required parameters")

        amount = to_amount(params.amount)
        booking = cls._get_or_404(MovieBooking, params.booking_id, "Booking not found")
        user = cls._get_or_404(User, params.user_id, "User not found")
        if params.theatre_id and str(params.theatre_id) != str(booking.theatre_id):
            raise PaymentValidationError(
                "Theatre does not match booking",
                details={"theatre_id": str(params.theatre_id), "booking_id": str(booking.id)},
            )

        ticket_price = SettlementCalculator.resolve_ticket_price(
            amount, booking.actual_ticket_price
        )

        with cls.atomic():
            open_request = (
                RefundRequest.objects.select_for_update()
                .filter(
                    booking=booking,
                    status__in=[
                        RefundRequestStatus.PENDING,
                        RefundRequestStatus.APPROVED,
                        RefundRequestStatus.PROCESSED,
                    ],
                )
                .exists()
            )
            if open_request:
                raise PaymentPreconditionError(
                    "A refund request already exists for this booking",
                    details={"booking_id": str(booking.id)},
                )

            refund_request = RefundRequest.objects.create(
                booking=booking,
                user=user,
                theatre_id=booking.theatre_id,
                amount=amount,
                actual_ticket_price=None if ticket_price.is_estimated else ticket_price.amount,
                estimated_ticket_price=SettlementCalculator.estimate_ticket_price(amount),
                ticket_price_is_estimated=ticket_price.is_estimated,
                payment_id=params.payment_id,
                reason=params.reason or DEFAULT_REFUND_REASON,
                show_date=params.show_date or "",
                movie_title=params.movie_title or "",
                theatre_name=params.theatre_name or "",
                selected_seats=params.selected_seats or [],
            )

            booking.status = BookingStatus.CANCELLED
            booking.cancelled_at = timezone.now()
            booking.save(update_fields=["status", "cancelled_at", "updated_at"])

        cls.get_logger().info(
            "Refund request created",
            extra={
                "refund_request_id": str(refund_request.id),
                "booking_id": str(booking.id),
                "amount": str(amount),
                "ticket_price_is_estimated": ticket_price.is_estimated,
            },
        )

        try:
            NotificationService.send_to_admin(
                catalog.MOVIE_REFUND_REQUEST,
                title="New Refund Request",
                body=(
                    f"{user.display_name} has requested a refund of "
                    f"₹{display_amount(amount)} for movie booking cancellation"
                ),
                data={
                    "type": catalog.MOVIE_REFUND_REQUEST,
                    "refundRequestId": str(refund_request.id),
                    "bookingId": str(booking.id),
                    "userId": str(user.id),
                    "amount": str(amount),
                    "userName": user.display_name,
                },
            )
        except Exception:
            cls.get_logger().exception(
                "Error sending refund request notification",
                extra={"refund_request_id": str(refund_request.id)},
            )

        return RefundRequestCreated(refund_request=refund_request)

    # =========================================================================
    # Admin processing
    # =========================================================================

    @classmethod
    def process_request(
        cls,
        refund_request_id,
        action: str | None,
        admin_notes: str = "",
    ) -> ProcessRefundResult:
        """
        Approve or reject a pending refund request.

        Raises:
            PaymentValidationError: id or action missing, unknown action
            PaymentNotFoundError: request does not exist
            PaymentPreconditionError: request is not pending
            PaymentProcessingError: the refund call failed
        """
        if not refund_request_id or not action:
            raise PaymentValidationError("Missing required parameters")
        if action not in RefundAction.values:
            raise PaymentValidationError(
                f"Invalid action: {action}",
                details={"allowed": list(RefundAction.values)},
            )
        admin_notes = admin_notes or ""

        with cls.atomic():
            try:
                refund_request = (
                    RefundRequest.objects.select_for_update()
                    .filter(pk=refund_request_id)
                    .first()
                )
            except (DjangoValidationError, ValueError):
                refund_request = None
            if refund_request is None:
                raise PaymentNotFoundError(
                    "Refund request not found",
                    details={"refund_request_id": str(refund_request_id)},
                )
            if refund_request.status != RefundRequestStatus.PENDING:
                raise PaymentPreconditionError(
                    "Refund request already processed",
                    details={"status": refund_request.status},
                )

            if action == RefundAction.REJECT:
                refund_request.reject(admin_notes)
            else:
                refund_request.approve(admin_notes)
            refund_request.save()

        if action == RefundAction.REJECT:
            return cls._finish_rejection(refund_request, admin_notes)
        return cls._execute_refund(refund_request)

    @classmethod
    def _finish_rejection(
        cls,
        refund_request: RefundRequest,
        admin_notes: str,
    ) -> ProcessRefundResult:
        cls.get_logger().info(
            "Refund request rejected",
            extra={"refund_request_id": str(refund_request.id)},
        )
        cls._notify_user(
            refund_request,
            catalog.REFUND_REJECTED,
            title="Refund Request Rejected",
            body=(
                "Your refund request has been rejected. "
                f"{admin_notes or 'Please contact support for more details.'}"
            ),
            data={
                "type": catalog.REFUND_REJECTED,
                "refundRequestId": str(refund_request.id),
                "bookingId": str(refund_request.booking_id),
            },
        )
        return ProcessRefundResult(
            refund_request=refund_request,
            message=REQUEST_REJECTED_MESSAGE,
        )

    @classmethod
    def _execute_refund(cls, refund_request: RefundRequest) -> ProcessRefundResult:
        logger = cls.get_logger()
        total = refund_request.amount
        ticket_price = SettlementCalculator.resolve_ticket_price(
            total, refund_request.actual_ticket_price
        )
        platform_amount = SettlementCalculator.platform_profit(total, ticket_price.amount)

        logger.info(
            "Refund breakdown",
            extra={
                "refund_request_id": str(refund_request.id),
                "total_amount": str(total),
                "ticket_price": str(ticket_price.amount),
                "platform_amount": str(platform_amount),
                "ticket_price_is_estimated": ticket_price.is_estimated,
            },
        )

        recovery = cls._recover_owner_share(refund_request, ticket_price.amount)
        breakdown = RefundBreakdown(
            total_amount=total,
            actual_ticket_price=ticket_price.amount,
            platform_amount=platform_amount,
            ticket_price_is_estimated=ticket_price.is_estimated,
            recovery=recovery,
        )

        adapter = cls.get_razorpay_adapter()
        try:
            refund = adapter.refund_payment(
                refund_request.payment_id,
                to_minor_units(total),
                notes={
                    "reason": refund_request.reason,
                    "booking_id": str(refund_request.booking_id),
                    "refund_request_id": str(refund_request.id),
                    "admin_notes": refund_request.admin_notes,
                    "theatre_owner_recovered": recovery.recovered,
                    "theatre_owner_refund_id": recovery.transfer_id,
                },
            )
        except RazorpayError as e:
            logger.error(
                "Razorpay refund failed",
                extra={"refund_request_id": str(refund_request.id), "error_code": e.error_code},
            )
            refund_request.fail(e.message)
            refund_request.save()
            raise PaymentProcessingError(
                f"Refund processing failed: {e.message}",
                details={"refund_request_id": str(refund_request.id)},
            ) from e

        now = timezone.now()
        breakdown_data = breakdown.to_dict()
        with cls.atomic():
            refund_request.mark_processed(
                refund_id=refund.id,
                refund_status=refund.status,
                breakdown=breakdown_data,
            )
            refund_request.save()
            MovieBooking.objects.filter(pk=refund_request.booking_id).update(
                refund_status=RefundRequestStatus.PROCESSED,
                refund_id=refund.id,
                refunded_at=now,
                refund_breakdown=breakdown_data,
                updated_at=now,
            )

        logger.info(
            "Refund processed",
            extra={
                "refund_request_id": str(refund_request.id),
                "refund_id": refund.id,
                "theatre_owner_recovered": recovery.recovered,
            },
        )

        cls._notify_user(
            refund_request,
            catalog.MOVIE_REFUND_PROCESSED,
            title="Refund Processed Successfully",
            body=cls._refund_message(breakdown),
            data={
                "type": catalog.MOVIE_REFUND_PROCESSED,
                "refundRequestId": str(refund_request.id),
                "bookingId": str(refund_request.booking_id),
                "amount": str(total),
                "refundId": refund.id,
                "theatreOwnerRecovered": recovery.recovered,
            },
        )

        return ProcessRefundResult(
            refund_request=refund_request,
            message=REFUND_PROCESSED_MESSAGE,
            refund_id=refund.id,
            breakdown=breakdown,
        )

    @classmethod
    def _notify_user(cls, refund_request: RefundRequest, type_key: str, **kwargs) -> None:
        """Push the outcome to the customer. The refund stands if this fails."""
        try:
            NotificationService.send_to_user(refund_request.user_id, type_key, **kwargs)
        except Exception:
            cls.get_logger().exception(
                "Error sending refund notification",
                extra={"refund_request_id": str(refund_request.id), "type": type_key},
            )

    @classmethod
    def _recover_owner_share(
        cls,
        refund_request: RefundRequest,
        ticket_price: Decimal,
    ) -> RecoveryOutcome:
        """
        Reverse-transfer the ticket price from the owner to the platform.

        Never raises: a failed recovery leaves the platform covering the
        refund.
        """
        logger = cls.get_logger()
        log_extra = {"refund_request_id": str(refund_request.id)}
        try:
            fallback_owner_id = (
                MovieBooking.objects.filter(pk=refund_request.booking_id)
                .values_list("owner_id", flat=True)
                .first()
            )
            account_id = AccountResolver.resolve(refund_request.theatre_id, fallback_owner_id)
            if account_id is None:
                logger.warning("No owner account for refund recovery", extra=log_extra)
                return RecoveryOutcome(error="Theatre owner account not found")

            transfer = cls.get_razorpay_adapter().create_reverse_transfer(
                amount_minor=to_minor_units(ticket_price),
                currency=getattr(settings, "PAYMENT_CURRENCY", "INR"),
                source=account_id,
                destination=settings.RAZORPAY_PLATFORM_ACCOUNT_ID,
                notes={
                    "purpose": RECOVERY_PURPOSE,
                    "booking_id": str(refund_request.booking_id),
                    "refund_request_id": str(refund_request.id),
                },
            )
        except Exception as e:
            logger.error(
                "Failed to recover from theatre owner",
                extra=log_extra,
                exc_info=True,
            )
            return RecoveryOutcome(attempted=True, error=str(e))

        logger.info(
            f"Recovered ₹{display_amount(ticket_price)} from theatre owner",
            extra={**log_extra, "transfer_id": transfer.id},
        )
        return RecoveryOutcome(attempted=True, recovered=True, transfer_id=transfer.id)

    @staticmethod
    def _refund_message(breakdown: RefundBreakdown) -> str:
        total = display_amount(breakdown.total_amount)
        if breakdown.recovery.recovered:
            return (
                f"Your refund of ₹{total} has been processed. Ticket amount "
                f"(₹{display_amount(breakdown.actual_ticket_price)}) recovered from "
                f"theatre owner, platform fees (₹{display_amount(breakdown.platform_amount)}) "
                "refunded by platform."
            )
        return (
            f"Your refund of ₹{total} has been processed and will reflect in your "
            "account within 5-7 business days."
        )

    @staticmethod
    def _get_or_404(model, pk, message: str):
        try:
            instance = model.objects.filter(pk=pk).first()
        except (DjangoValidationError, ValueError):
            instance = None
        if instance is None:
            raise PaymentNotFoundError(message, details={"id": str(pk)})
        return instance
