"""
Tests for the payout task and the booking-created signal.
"""

import uuid

import pytest

from movies.models import BookingStatus, PaymentMethod
from movies.tests.factories import MovieBookingFactory
from payments.exceptions import RazorpayAPIUnavailableError
from payments.state_machines import PayoutStatus
from payments.tasks import process_booking_payout


@pytest.mark.django_db
class TestBookingCreatedSignal:
    def test_eligible_booking_enqueues_payout_on_commit(
        self, theatre, mocker, django_capture_on_commit_callbacks
    ):
        delay = mocker.patch("payments.tasks.process_booking_payout.delay")

        with django_capture_on_commit_callbacks(execute=True):
            booking = MovieBookingFactory(theatre=theatre)

        delay.assert_called_once_with(str(booking.id))

    @pytest.mark.parametrize(
        "overrides",
        [{"payment_method": PaymentMethod.OFFLINE}, {"status": BookingStatus.PENDING}],
    )
    def test_ineligible_booking_is_not_enqueued(
        self, theatre, mocker, django_capture_on_commit_callbacks, overrides
    ):
        delay = mocker.patch("payments.tasks.process_booking_payout.delay")

        with django_capture_on_commit_callbacks(execute=True):
            MovieBookingFactory(theatre=theatre, **overrides)

        delay.assert_not_called()

    def test_update_does_not_enqueue(self, theatre, mocker, django_capture_on_commit_callbacks):
        booking = MovieBookingFactory(theatre=theatre)
        delay = mocker.patch("payments.tasks.process_booking_payout.delay")

        with django_capture_on_commit_callbacks(execute=True):
            booking.movie_title = "Dune"
            booking.save()

        delay.assert_not_called()


@pytest.mark.django_db
class TestProcessBookingPayoutTask:
    def test_settles_booking(self, booking, mock_razorpay_adapter):
        result = process_booking_payout.apply(args=[str(booking.id)]).get()

        assert result == {
            "status": "settled",
            "booking_id": str(booking.id),
            "transfer_id": "trf_test123",
        }
        booking.refresh_from_db()
        assert booking.payout_status == PayoutStatus.SETTLED

    def test_duplicate_delivery_is_skipped(self, booking, mock_razorpay_adapter):
        process_booking_payout.apply(args=[str(booking.id)])

        result = process_booking_payout.apply(args=[str(booking.id)]).get()

        assert result["status"] == "skipped"
        assert mock_razorpay_adapter.transfer_payment_split.call_count == 1

    def test_gateway_failure_is_not_retried(self, booking, mock_razorpay_adapter):
        mock_razorpay_adapter.transfer_payment_split.side_effect = RazorpayAPIUnavailableError(
            "Razorpay is unavailable"
        )

        result = process_booking_payout.apply(args=[str(booking.id)]).get()

        assert result["status"] == "failed"
        assert result["error"] == "Razorpay is unavailable"
        assert mock_razorpay_adapter.transfer_payment_split.call_count == 1
        booking.refresh_from_db()
        assert booking.payout_status == PayoutStatus.FAILED

    def test_unknown_booking(self, mock_razorpay_adapter):
        result = process_booking_payout.apply(args=[str(uuid.uuid4())]).get()

        assert result["status"] == "not_found"

    def test_malformed_booking_id(self):
        result = process_booking_payout.apply(args=["not-a-uuid"]).get()

        assert result == {"status": "not_found", "booking_id": "not-a-uuid"}
