"""
Payout service for settling bookings with theatre owners.

When an Online, confirmed booking is created, the owner's share of the base
ticket price is transferred from the customer's captured payment to the
owner's Razorpay linked account (Razorpay Route).

Flow:
1. Claim the booking: atomic conditional UPDATE pending -> processing.
   Only one delivery of the booking-created event wins the claim.
2. Validate (fail fast): amount, owner account, payment id, account format.
3. Transfer the owner share through the Razorpay adapter (no transaction
   is held open around the call).
4. Record the outcome: processing -> settled plus a SettlementRecord, or
   processing -> failed with a reason the admin console shows.

Failures are never retried here. A failed booking is re-driven by an admin
(see reset_failed_payout and the "Retry payout" admin action).

Usage:
    from payments.services import PayoutService

    result = PayoutService.process_booking(booking_id)
    if not result.success:
        logger.warning(result.error)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.utils import timezone

from core.services import BaseService, ServiceResult
from movies.models import OWNER_ACCOUNT_PLACEHOLDER, MovieBooking

from payments.adapters import RazorpayAdapter, TransferLeg
from payments.exceptions import PaymentValidationError, RazorpayError
from payments.models import SettlementRecord
from payments.services.account_resolver import AccountResolver, is_connected_account_id
from payments.services.settlement_calculator import (
    OWNER_SHARE_RATIO,
    PLATFORM_FEE_RATE,
    SettlementCalculator,
    to_amount,
    to_minor_units,
)
from payments.state_machines import PayoutStatus


# =============================================================================
# Constants
# =============================================================================

PAYOUT_METHOD = "Razorpay Route"

INVALID_AMOUNT = "Invalid amount"
INVALID_TICKET_PRICE = "Invalid ticket price"
MISSING_ACCOUNT = (
    "Missing Razorpay connected account ID. Theatre owner must add their "
    "Razorpay account ID to receive payments."
)
MISSING_PAYMENT_ID = "Missing Razorpay payment ID for transfer"
INVALID_ACCOUNT = "Theatre owner does not have a valid Razorpay connected account ID."


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class PayoutOutcome:
    """
    What happened to a booking's payout.

    Attributes:
        booking_id: Booking that was processed
        payout_status: Status after this attempt
        transfer_id: Razorpay transfer id when settled
        settlement: SettlementRecord when settled
        skipped: True when this delivery did nothing (ineligible or claimed)
    """

    booking_id: uuid.UUID
    payout_status: str
    transfer_id: str | None = None
    settlement: SettlementRecord | None = None
    skipped: bool = False


# =============================================================================
# Payout Service
# =============================================================================


class PayoutService(BaseService):
    """
    Service for settling booking payouts.

    Error Handling:
        - Validation and resolution failures: booking marked failed, result
          is a failure with the same reason
        - Razorpay errors: booking marked failed with the gateway message
        - Anything unexpected: booking marked failed with
          "Function error: ..." and logged with traceback

    No exception escapes process_booking for a booking that exists.
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

    @classmethod
    def process_booking(cls, booking_id) -> ServiceResult[PayoutOutcome]:
        """
        Settle the payout of a newly created booking.

        Safe to call more than once for the same booking: only the call that
        claims the booking (pending -> processing) does any work.

        Returns:
            ServiceResult with PayoutOutcome. success is True when the
            booking was settled or when there was nothing to do.
        """
        logger = cls.get_logger()
        booking = MovieBooking.objects.filter(pk=booking_id).first()
        if booking is None:
            logger.warning(
                "Booking not found for payout",
                extra={"booking_id": str(booking_id)},
            )
            return ServiceResult.failure("Booking not found", error_code="NOT_FOUND")

        if not booking.is_payout_eligible:
            logger.info(
                "Skipping payout: booking is not an online confirmed payment",
                extra={
                    "booking_id": str(booking.id),
                    "payment_method": booking.payment_method,
                    "status": booking.status,
                },
            )
            return ServiceResult.success(
                PayoutOutcome(booking.id, booking.payout_status, skipped=True)
            )

        if not cls._claim(booking):
            logger.info(
                "Skipping payout: already claimed",
                extra={"booking_id": str(booking.id), "payout_status": booking.payout_status},
            )
            return ServiceResult.success(
                PayoutOutcome(booking.id, booking.payout_status, skipped=True)
            )

        logger.info(
            "Processing booking payout",
            extra={
                "booking_id": str(booking.id),
                "total_amount": str(booking.total_amount),
                "theatre_id": str(booking.theatre_id),
            },
        )

        try:
            return cls._settle(booking)
        except Exception as e:
            logger.error(
                f"Payout processing error: {type(e).__name__}",
                extra={"booking_id": str(booking.id)},
                exc_info=True,
            )
            return cls._fail(booking, f"Function error: {e}", "INTERNAL")

    @classmethod
    def reset_failed_payout(cls, booking_id) -> bool:
        """
        Move a failed payout back to pending so it can be processed again.

        Returns:
            True if the booking was failed and is now pending
        """
        updated = MovieBooking.objects.filter(
            pk=booking_id,
            payout_status=PayoutStatus.FAILED,
        ).update(
            payout_status=PayoutStatus.PENDING,
            payout_failure_reason="",
            updated_at=timezone.now(),
        )
        if updated:
            cls.get_logger().info(
                "Failed payout reset for retry",
                extra={"booking_id": str(booking_id)},
            )
        return bool(updated)

    # =========================================================================
    # Steps
    # =========================================================================

    @classmethod
    def _claim(cls, booking: MovieBooking) -> bool:
        """Atomically move pending -> processing. False if another run owns it."""
        claimed = MovieBooking.objects.filter(
            pk=booking.pk,
            payout_status=PayoutStatus.PENDING,
        ).update(
            payout_status=PayoutStatus.PROCESSING,
            payout_failure_reason="",
            updated_at=timezone.now(),
        )
        if claimed:
            booking.payout_status = PayoutStatus.PROCESSING
        else:
            booking.refresh_from_db(fields=["payout_status"])
        return bool(claimed)

    @classmethod
    def _settle(cls, booking: MovieBooking) -> ServiceResult[PayoutOutcome]:
        try:
            total = to_amount(booking.total_amount)
        except PaymentValidationError:
            total = Decimal("0")
        if total <= 0:
            return cls._fail(booking, INVALID_AMOUNT, "INVALID_AMOUNT")

        account_id = booking.theatre_owner_account_id
        if not account_id or account_id == OWNER_ACCOUNT_PLACEHOLDER:
            try:
                account_id = AccountResolver.resolve(booking.theatre_id, booking.owner_id)
            except Exception as e:
                cls.get_logger().error(
                    "Owner account resolution failed",
                    extra={"booking_id": str(booking.id)},
                    exc_info=True,
                )
                return cls._fail(
                    booking, f"Owner account resolution error: {e}", "ACCOUNT_RESOLUTION_ERROR"
                )
            if not account_id:
                return cls._fail(booking, MISSING_ACCOUNT, "MISSING_ACCOUNT")

        payment_id = booking.razorpay_payment_id
        if not payment_id:
            return cls._fail(booking, MISSING_PAYMENT_ID, "MISSING_PAYMENT_ID")

        if not is_connected_account_id(account_id):
            return cls._fail(booking, INVALID_ACCOUNT, "INVALID_ACCOUNT")

        ticket_price = booking.actual_ticket_price
        if ticket_price is None or ticket_price <= 0:
            return cls._fail(booking, INVALID_TICKET_PRICE, "INVALID_TICKET_PRICE")

        split = SettlementCalculator.split(total, ticket_price)
        amount_minor = to_minor_units(split.owner_share)
        currency = getattr(settings, "PAYMENT_CURRENCY", "INR")

        cls.get_logger().info(
            "Transferring owner share",
            extra={
                "booking_id": str(booking.id),
                "total_paid": str(split.total),
                "owner_share": str(split.owner_share),
                "platform_profit": str(split.platform_profit),
                "owner_account_id": account_id,
            },
        )

        adapter = cls.get_razorpay_adapter()
        try:
            transfer = adapter.transfer_payment_split(
                payment_id,
                [
                    TransferLeg(
                        account=account_id,
                        amount_minor=amount_minor,
                        currency=currency,
                        notes={
                            "purpose": (
                                "Movie ticket booking settlement - "
                                f"{OWNER_SHARE_RATIO:.0%} of base ticket price"
                            ),
                            "note": (
                                f"Platform fee ({PLATFORM_FEE_RATE:.0%}) "
                                "collected separately from customer"
                            ),
                        },
                    )
                ],
            )
        except RazorpayError as e:
            return cls._fail(booking, e.message, e.error_code)

        now = timezone.now()
        with cls.atomic():
            MovieBooking.objects.filter(
                pk=booking.pk,
                payout_status=PayoutStatus.PROCESSING,
            ).update(
                payout_status=PayoutStatus.SETTLED,
                payout_failure_reason="",
                transfer_response=transfer.raw_response,
                theatre_owner_account_id=account_id,
                payout_method=PAYOUT_METHOD,
                payout_settled_at=now,
                updated_at=now,
            )
            settlement = SettlementRecord.objects.create(
                booking=booking,
                theatre_id=booking.theatre_id,
                total_paid=split.total,
                owner_share=split.owner_share,
                platform_profit=split.platform_profit,
                razorpay_payment_id=payment_id,
                owner_account_id=account_id,
                transfer_id=transfer.id,
                settled_at=now,
            )

        cls.get_logger().info(
            "Booking payout settled",
            extra={
                "booking_id": str(booking.id),
                "transfer_id": transfer.id,
                "amount_minor": amount_minor,
            },
        )

        return ServiceResult.success(
            PayoutOutcome(
                booking_id=booking.id,
                payout_status=PayoutStatus.SETTLED,
                transfer_id=transfer.id,
                settlement=settlement,
            )
        )

    @classmethod
    def _fail(
        cls,
        booking: MovieBooking,
        reason: str,
        error_code: str,
    ) -> ServiceResult[PayoutOutcome]:
        """Record processing -> failed with a reason and return a failure."""
        cls.get_logger().warning(
            f"Booking payout failed: {reason}",
            extra={"booking_id": str(booking.id), "error_code": error_code},
        )
        MovieBooking.objects.filter(
            pk=booking.pk,
            payout_status=PayoutStatus.PROCESSING,
        ).update(
            payout_status=PayoutStatus.FAILED,
            payout_failure_reason=reason,
            updated_at=timezone.now(),
        )
        booking.payout_status = PayoutStatus.FAILED
        booking.payout_failure_reason = reason
        return ServiceResult.failure(reason, error_code=error_code)
