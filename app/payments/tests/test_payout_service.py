"""
Tests for PayoutService.

Tests cover:
- Settlement of an eligible booking (transfer amount, records written)
- Fail-fast validation (amount, owner account, payment id, ticket price)
- Razorpay errors recorded on the booking
- The pending -> processing claim (redelivery makes no gateway call)
- Resetting a failed payout

Note: Fixtures come from payments/tests/conftest.py. The Razorpay adapter
is a MagicMock injected through set_razorpay_adapter().
"""

import uuid
from decimal import Decimal

import pytest

from movies.models import BookingStatus, OWNER_ACCOUNT_PLACEHOLDER, MovieBooking, PaymentMethod
from movies.tests.factories import MovieBookingFactory, TheatreFactory
from payments.adapters import TransferLeg
from payments.exceptions import RazorpayAPIUnavailableError, RazorpayInvalidAccountError
from payments.models import SettlementRecord
from payments.services import PayoutService
from payments.services.payout_service import (
    INVALID_ACCOUNT,
    INVALID_AMOUNT,
    INVALID_TICKET_PRICE,
    MISSING_ACCOUNT,
    MISSING_PAYMENT_ID,
    PAYOUT_METHOD,
)
from payments.state_machines import PayoutStatus


def get_fresh_booking(booking_id) -> MovieBooking:
    return MovieBooking.objects.get(id=booking_id)


# =============================================================================
# Successful Settlement
# =============================================================================


@pytest.mark.django_db
class TestSuccessfulPayout:
    def test_transfers_owner_share_in_paise(self, booking, mock_razorpay_adapter):
        result = PayoutService.process_booking(booking.id)

        assert result.success
        mock_razorpay_adapter.transfer_payment_split.assert_called_once()
        payment_id, legs = mock_razorpay_adapter.transfer_payment_split.call_args.args
        assert payment_id == "pay_test500"
        assert len(legs) == 1
        leg = legs[0]
        assert isinstance(leg, TransferLeg)
        assert leg.account == "acc_owner00001"
        assert leg.amount_minor == 44000
        assert leg.currency == "INR"
        assert leg.notes["purpose"] == (
            "Movie ticket booking settlement - 100% of base ticket price"
        )
        assert leg.notes["note"] == "Platform fee (12%) collected separately from customer"

    def test_booking_marked_settled(self, booking, mock_razorpay_adapter):
        PayoutService.process_booking(booking.id)

        fresh = get_fresh_booking(booking.id)
        assert fresh.payout_status == PayoutStatus.SETTLED
        assert fresh.payout_method == PAYOUT_METHOD
        assert fresh.theatre_owner_account_id == "acc_owner00001"
        assert fresh.payout_settled_at is not None
        assert fresh.transfer_response["items"][0]["id"] == "trf_test123"
        assert fresh.payout_failure_reason == ""

    def test_settlement_record_written(self, booking, mock_razorpay_adapter):
        result = PayoutService.process_booking(booking.id)

        settlement = SettlementRecord.objects.get(booking=booking)
        assert settlement.total_paid == Decimal("500.00")
        assert settlement.owner_share == Decimal("440.00")
        assert settlement.platform_profit == Decimal("60.00")
        assert settlement.transfer_id == "trf_test123"
        assert settlement.owner_account_id == "acc_owner00001"
        assert settlement.razorpay_payment_id == "pay_test500"
        assert result.data.settlement == settlement
        assert result.data.transfer_id == "trf_test123"

    def test_uses_account_id_recorded_on_booking(self, theatre, mock_razorpay_adapter):
        booking = MovieBookingFactory(theatre=theatre, theatre_owner_account_id="acc_onbooking")

        PayoutService.process_booking(booking.id)

        _, legs = mock_razorpay_adapter.transfer_payment_split.call_args.args
        assert legs[0].account == "acc_onbooking"

    def test_placeholder_account_is_resolved(self, theatre, mock_razorpay_adapter):
        booking = MovieBookingFactory(
            theatre=theatre, theatre_owner_account_id=OWNER_ACCOUNT_PLACEHOLDER
        )

        PayoutService.process_booking(booking.id)

        _, legs = mock_razorpay_adapter.transfer_payment_split.call_args.args
        assert legs[0].account == "acc_owner00001"

    def test_fallback_owner_used_when_theatre_has_no_owner(self, mock_razorpay_adapter, owner):
        theatre = TheatreFactory(owner=None)
        booking = MovieBookingFactory(theatre=theatre, owner=owner)

        result = PayoutService.process_booking(booking.id)

        assert result.success
        _, legs = mock_razorpay_adapter.transfer_payment_split.call_args.args
        assert legs[0].account == "acc_owner00001"


# =============================================================================
# Validation Failures
# =============================================================================


@pytest.mark.django_db
class TestPayoutValidation:
    def test_zero_total_fails_without_gateway_call(self, theatre, mock_razorpay_adapter):
        booking = MovieBookingFactory(theatre=theatre, total_amount=Decimal("0"))

        result = PayoutService.process_booking(booking.id)

        assert not result.success
        assert result.error == INVALID_AMOUNT
        mock_razorpay_adapter.transfer_payment_split.assert_not_called()
        fresh = get_fresh_booking(booking.id)
        assert fresh.payout_status == PayoutStatus.FAILED
        assert fresh.payout_failure_reason == INVALID_AMOUNT

    def test_missing_account_fails(self, mock_razorpay_adapter):
        owner_without_account = TheatreFactory(owner__payment_details={})
        booking = MovieBookingFactory(theatre=owner_without_account)

        result = PayoutService.process_booking(booking.id)

        assert result.error == MISSING_ACCOUNT
        mock_razorpay_adapter.transfer_payment_split.assert_not_called()
        assert get_fresh_booking(booking.id).payout_failure_reason == MISSING_ACCOUNT

    def test_missing_payment_id_fails(self, theatre, mock_razorpay_adapter):
        booking = MovieBookingFactory(theatre=theatre, razorpay_payment_id="")

        result = PayoutService.process_booking(booking.id)

        assert result.error == MISSING_PAYMENT_ID
        mock_razorpay_adapter.transfer_payment_split.assert_not_called()

    def test_account_without_prefix_fails(self, theatre, mock_razorpay_adapter):
        booking = MovieBookingFactory(theatre=theatre, theatre_owner_account_id="ba_1234567890")

        result = PayoutService.process_booking(booking.id)

        assert result.error == INVALID_ACCOUNT
        mock_razorpay_adapter.transfer_payment_split.assert_not_called()

    @pytest.mark.parametrize("ticket_price", [None, Decimal("0")])
    def test_missing_ticket_price_fails(self, theatre, mock_razorpay_adapter, ticket_price):
        booking = MovieBookingFactory(theatre=theatre, actual_ticket_price=ticket_price)

        result = PayoutService.process_booking(booking.id)

        assert result.error == INVALID_TICKET_PRICE
        mock_razorpay_adapter.transfer_payment_split.assert_not_called()
        assert get_fresh_booking(booking.id).payout_status == PayoutStatus.FAILED

    def test_unexpected_error_is_recorded(self, booking, mock_razorpay_adapter, mocker):
        mocker.patch(
            "payments.services.payout_service.SettlementCalculator.split",
            side_effect=RuntimeError("boom"),
        )

        result = PayoutService.process_booking(booking.id)

        assert not result.success
        assert result.error == "Function error: boom"
        fresh = get_fresh_booking(booking.id)
        assert fresh.payout_status == PayoutStatus.FAILED
        assert fresh.payout_failure_reason == "Function error: boom"


# =============================================================================
# Razorpay Errors
# =============================================================================


@pytest.mark.django_db
class TestPayoutGatewayErrors:
    @pytest.mark.parametrize(
        "error",
        [
            RazorpayInvalidAccountError("The account is not activated"),
            RazorpayAPIUnavailableError("Razorpay is unavailable"),
        ],
    )
    def test_gateway_error_marks_failed_without_retry(
        self, booking, mock_razorpay_adapter, error
    ):
        mock_razorpay_adapter.transfer_payment_split.side_effect = error

        result = PayoutService.process_booking(booking.id)

        assert not result.success
        assert result.error == error.message
        assert mock_razorpay_adapter.transfer_payment_split.call_count == 1
        fresh = get_fresh_booking(booking.id)
        assert fresh.payout_status == PayoutStatus.FAILED
        assert fresh.payout_failure_reason == error.message
        assert not SettlementRecord.objects.filter(booking=booking).exists()


# =============================================================================
# Claim and Idempotency
# =============================================================================


@pytest.mark.django_db
class TestPayoutClaim:
    def test_redelivery_after_settlement_makes_no_call(self, booking, mock_razorpay_adapter):
        PayoutService.process_booking(booking.id)
        mock_razorpay_adapter.reset_mock()

        result = PayoutService.process_booking(booking.id)

        assert result.success
        assert result.data.skipped
        assert result.data.payout_status == PayoutStatus.SETTLED
        mock_razorpay_adapter.transfer_payment_split.assert_not_called()
        assert SettlementRecord.objects.filter(booking=booking).count() == 1

    @pytest.mark.parametrize("status", [PayoutStatus.PROCESSING, PayoutStatus.FAILED])
    def test_booking_not_pending_is_skipped(self, theatre, mock_razorpay_adapter, status):
        booking = MovieBookingFactory(theatre=theatre, payout_status=status)

        result = PayoutService.process_booking(booking.id)

        assert result.data.skipped
        mock_razorpay_adapter.transfer_payment_split.assert_not_called()
        assert get_fresh_booking(booking.id).payout_status == status

    @pytest.mark.parametrize(
        "overrides",
        [
            {"payment_method": PaymentMethod.OFFLINE},
            {"status": BookingStatus.PENDING},
            {"status": BookingStatus.CANCELLED},
        ],
    )
    def test_ineligible_booking_is_skipped(self, theatre, mock_razorpay_adapter, overrides):
        booking = MovieBookingFactory(theatre=theatre, **overrides)

        result = PayoutService.process_booking(booking.id)

        assert result.success
        assert result.data.skipped
        mock_razorpay_adapter.transfer_payment_split.assert_not_called()
        assert get_fresh_booking(booking.id).payout_status == PayoutStatus.PENDING

    def test_unknown_booking(self, mock_razorpay_adapter):
        result = PayoutService.process_booking(uuid.uuid4())

        assert not result.success
        assert result.error_code == "NOT_FOUND"


@pytest.mark.django_db
class TestResetFailedPayout:
    def test_failed_payout_goes_back_to_pending(self, theatre):
        booking = MovieBookingFactory(
            theatre=theatre,
            payout_status=PayoutStatus.FAILED,
            payout_failure_reason=MISSING_ACCOUNT,
        )

        assert PayoutService.reset_failed_payout(booking.id) is True

        fresh = get_fresh_booking(booking.id)
        assert fresh.payout_status == PayoutStatus.PENDING
        assert fresh.payout_failure_reason == ""

    def test_settled_payout_is_not_reset(self, theatre):
        booking = MovieBookingFactory(theatre=theatre, payout_status=PayoutStatus.SETTLED)

        assert PayoutService.reset_failed_payout(booking.id) is False
        assert get_fresh_booking(booking.id).payout_status == PayoutStatus.SETTLED

    def test_retry_after_reset_settles(self, theatre, mock_razorpay_adapter):
        booking = MovieBookingFactory(theatre=theatre, payout_status=PayoutStatus.FAILED)

        PayoutService.reset_failed_payout(booking.id)
        result = PayoutService.process_booking(booking.id)

        assert result.success
        assert get_fresh_booking(booking.id).payout_status == PayoutStatus.SETTLED
