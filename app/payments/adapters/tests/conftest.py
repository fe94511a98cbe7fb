"""
Pytest fixtures for Razorpay adapter tests.

The Razorpay SDK client is patched, so no test talks to the network.

Sections:
    - Settings Fixtures
    - Mock Razorpay Client Fixtures
    - Mock Response Fixtures
"""

from unittest.mock import MagicMock, patch

import pytest


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def razorpay_credentials(settings):
    """Configure test API credentials."""
    settings.RAZORPAY_KEY_ID = "rzp_test_key"
    settings.RAZORPAY_KEY_SECRET = "rzp_test_secret"
    settings.RAZORPAY_API_TIMEOUT_SECONDS = 10
    return settings


# =============================================================================
# Mock Razorpay Client Fixtures
# =============================================================================


@pytest.fixture
def mock_razorpay_client(razorpay_credentials):
    """Patch razorpay.Client and yield the client instance."""
    with patch("razorpay.Client") as client_class:
        client = MagicMock()
        client_class.return_value = client
        client.client_class = client_class
        yield client


# =============================================================================
# Mock Response Fixtures
# =============================================================================


@pytest.fixture
def transfer_collection():
    """Response of payment.transfer (a collection of transfers)."""

    def _create(transfer_id="trf_test123", amount=44000, recipient="acc_X"):
        return {
            "entity": "collection",
            "count": 1,
            "items": [
                {
                    "id": transfer_id,
                    "entity": "transfer",
                    "source": "pay_Y",
                    "recipient": recipient,
                    "amount": amount,
                    "currency": "INR",
                }
            ],
        }

    return _create


@pytest.fixture
def refund_response():
    """Response of payment.refund."""

    def _create(refund_id="rfnd_test123", amount=11200, status="processed"):
        return {
            "id": refund_id,
            "entity": "refund",
            "amount": amount,
            "currency": "INR",
            "payment_id": "pay_Y",
            "status": status,
        }

    return _create
