"""
Pytest fixtures for payment tests.

The Razorpay adapter is replaced by a MagicMock injected through
set_razorpay_adapter(), so no test reaches the SDK. Fixtures return objects
in the states the payout and refund flows start from.

Usage:
    def test_settles(booking, mock_razorpay_adapter):
        PayoutService.process_booking(booking.id)
        mock_razorpay_adapter.transfer_payment_split.assert_called_once()
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from authentication.tests.factories import AdminUserFactory, OwnerFactory
from movies.tests.factories import MovieBookingFactory, TheatreFactory
from payments.adapters import RefundResult, TransferResult
from payments.services import PayoutService, RefundService, SplitOrderService
from payments.tests.factories import RefundRequestFactory


# =============================================================================
# Razorpay Adapter Fixtures
# =============================================================================


@pytest.fixture
def transfer_result():
    def _create(transfer_id="trf_test123", amount_minor=44000, account="acc_owner00001"):
        return TransferResult(
            id=transfer_id,
            amount_minor=amount_minor,
            currency="INR",
            destination_account=account,
            raw_response={
                "entity": "collection",
                "count": 1,
                "items": [{"id": transfer_id, "amount": amount_minor, "recipient": account}],
            },
        )

    return _create


@pytest.fixture
def mock_razorpay_adapter(transfer_result, settings):
    """Inject a mock adapter into every payment service."""
    settings.RAZORPAY_PLATFORM_ACCOUNT_ID = "acc_merchant"
    settings.PAYMENT_CURRENCY = "INR"

    adapter = MagicMock()
    adapter.transfer_payment_split.return_value = transfer_result()
    adapter.refund_payment.return_value = RefundResult(
        id="rfnd_test123",
        amount_minor=11200,
        status="processed",
        payment_id="pay_test",
        raw_response={"id": "rfnd_test123", "status": "processed"},
    )
    adapter.create_reverse_transfer.return_value = TransferResult(
        id="trf_recovery123",
        amount_minor=10000,
        currency="INR",
        destination_account="acc_merchant",
        raw_response={"id": "trf_recovery123"},
    )

    for service in (PayoutService, RefundService, SplitOrderService):
        service.set_razorpay_adapter(adapter)
    yield adapter
    for service in (PayoutService, RefundService, SplitOrderService):
        service.set_razorpay_adapter(None)


# =============================================================================
# People and Theatres
# =============================================================================


@pytest.fixture
def admin_recipient(db, settings):
    """Operator account that receives admin notifications."""
    settings.ADMIN_NOTIFICATION_EMAIL = "ops@example.com"
    return AdminUserFactory(email="ops@example.com")


@pytest.fixture
def owner(db):
    return OwnerFactory(payment_details={"razorpayAccountId": "acc_owner00001"})


@pytest.fixture
def theatre(db, owner):
    return TheatreFactory(owner=owner)


# =============================================================================
# Booking Fixtures
# =============================================================================


@pytest.fixture
def booking(db, theatre):
    """Online, confirmed booking of 500.00 with a 440.00 ticket price."""
    return MovieBookingFactory(
        theatre=theatre,
        total_amount=Decimal("500.00"),
        actual_ticket_price=Decimal("440.00"),
        razorpay_payment_id="pay_test500",
    )


@pytest.fixture
def refund_request(db, theatre):
    """Pending request for a 112.00 booking with a 100.00 ticket."""
    booking = MovieBookingFactory(
        theatre=theatre,
        total_amount=Decimal("112.00"),
        actual_ticket_price=Decimal("100.00"),
        razorpay_payment_id="pay_test112",
    )
    return RefundRequestFactory(booking=booking)
