"""
Fixtures for notifications tests.
"""

import pytest

from authentication.tests.factories import AdminUserFactory, UserFactory


@pytest.fixture
def fcm_enabled(settings):
    settings.FCM_ENABLED = True


@pytest.fixture
def admin_recipient(db, settings):
    settings.ADMIN_NOTIFICATION_EMAIL = "ops@example.com"
    return AdminUserFactory(email="ops@example.com", fcm_token="admin-device-token")


@pytest.fixture
def user(db):
    return UserFactory(name="Asha", fcm_token="user-device-token")


@pytest.fixture
def mock_push_task(mocker):
    """Patch the Celery task so deliveries are only enqueued."""
    return mocker.patch("notifications.tasks.send_push_notification.delay")


@pytest.fixture
def mock_fcm_send(mocker):
    return mocker.patch(
        "notifications.tasks.FCMProvider.send",
        return_value="projects/bookmybiz/messages/0:1234",
    )
