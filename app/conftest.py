"""
Pytest configuration shared by all apps.

Provides the API client fixtures and auto-marks tests by filename.
App-specific fixtures are defined in each app's tests/conftest.py.
"""

import pytest
from rest_framework.test import APIClient

from payments.services import PayoutService, RefundService, SplitOrderService


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full request-to-database workflows)
    - test_views.py, test_*_service.py, test_tasks.py, etc. → integration
    - test_models.py, test_settlement_calculator.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_tasks.py",
        "test_handlers.py",
        "test_signals.py",
        "test_payout_service.py",
        "test_refund_service.py",
        "test_order_service.py",
        "test_account_resolver.py",
        "test_email_service.py",
        "test_admin.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_serializers.py",
        "test_settlement_calculator.py",
        "test_razorpay_adapter.py",
        "test_providers.py",
        "test_exceptions.py",
        "test_exception_handler.py",
    ]

    for item in items:
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def authenticated_client(db):
    """Client authenticated as a customer; the user is on client.user."""
    from authentication.tests.factories import UserFactory

    user = UserFactory()
    client = APIClient()
    client.force_authenticate(user=user)
    client.user = user
    return client


@pytest.fixture
def admin_client(db):
    """Client authenticated as a staff operator."""
    from authentication.tests.factories import AdminUserFactory

    admin = AdminUserFactory()
    client = APIClient()
    client.force_authenticate(user=admin)
    client.user = admin
    return client


@pytest.fixture(autouse=True)
def reset_razorpay_adapters():
    """Injected adapters never leak between tests."""
    yield
    for service in (PayoutService, RefundService, SplitOrderService):
        service.set_razorpay_adapter(None)
