"""
Tests for NotificationService.
"""

import pytest
from freezegun import freeze_time

from authentication.tests.factories import UserFactory
from notifications import catalog
from notifications.models import (
    AndroidChannel,
    DeliveryStatus,
    Notification,
    NotificationDelivery,
    NotificationType,
    SkipReason,
)
from notifications.services import NotificationService
from notifications.tests.factories import NotificationTypeFactory


@pytest.mark.django_db
class TestGetNotificationType:
    def test_created_from_catalog_on_first_use(self):
        notification_type = NotificationService.get_notification_type(catalog.THEATRE_APPROVED)

        assert notification_type.title_template == "Theatre Approved! 🎉"
        assert notification_type.android_channel_id == AndroidChannel.THEATRE_STATUS

    def test_existing_row_is_reused(self):
        NotificationTypeFactory(key=catalog.THEATRE_APPROVED, title_template="Edited")

        notification_type = NotificationService.get_notification_type(catalog.THEATRE_APPROVED)

        assert notification_type.title_template == "Edited"
        assert NotificationType.objects.filter(key=catalog.THEATRE_APPROVED).count() == 1

    def test_unknown_key(self):
        assert NotificationService.get_notification_type("no_such_type") is None


@pytest.mark.django_db
class TestCreateNotification:
    def test_renders_templates_and_enqueues_push(self, user, fcm_enabled, mock_push_task):
        result = NotificationService.create_notification(
            user, catalog.THEATRE_APPROVED, data={"theatreName": "Screen 1"}
        )

        assert result.success
        notification = result.data
        assert notification.title == "Theatre Approved! 🎉"
        assert 'Your theatre "Screen 1" has been approved' in notification.body
        delivery = notification.deliveries.get()
        assert delivery.status == DeliveryStatus.PENDING
        mock_push_task.assert_called_once_with(str(delivery.id))

    def test_explicit_title_and_body(self, user, fcm_enabled, mock_push_task):
        result = NotificationService.create_notification(
            user,
            catalog.REFUND_REJECTED,
            title="Refund Request Rejected",
            body="Your refund request has been rejected.",
        )

        assert result.data.body == "Your refund request has been rejected."

    def test_without_device_token_is_skipped(self, fcm_enabled, mock_push_task):
        recipient = UserFactory(fcm_token="")

        result = NotificationService.create_notification(
            recipient, catalog.THEATRE_APPROVED, data={"theatreName": "Screen 1"}
        )

        delivery = result.data.deliveries.get()
        assert delivery.status == DeliveryStatus.SKIPPED
        assert delivery.skipped_reason == SkipReason.NO_DEVICE_TOKEN
        mock_push_task.assert_not_called()

    def test_fcm_disabled_is_skipped(self, user, settings, mock_push_task):
        settings.FCM_ENABLED = False

        result = NotificationService.create_notification(
            user, catalog.THEATRE_APPROVED, data={"theatreName": "Screen 1"}
        )

        delivery = result.data.deliveries.get()
        assert delivery.skipped_reason == SkipReason.PROVIDER_DISABLED
        mock_push_task.assert_not_called()

    def test_inactive_type(self, user, mock_push_task):
        NotificationTypeFactory(key=catalog.THEATRE_APPROVED, is_active=False)

        result = NotificationService.create_notification(
            user, catalog.THEATRE_APPROVED, data={"theatreName": "Screen 1"}
        )

        assert not result.success
        assert result.error_code == "TYPE_INACTIVE"
        assert not Notification.objects.exists()

    def test_unknown_type(self, user):
        result = NotificationService.create_notification(user, "no_such_type")

        assert result.error_code == "TYPE_NOT_FOUND"

    def test_duplicate_idempotency_key(self, user, mock_push_task):
        NotificationService.create_notification(
            user, catalog.REFUND_REJECTED, title="t", body="b", idempotency_key="refund-1"
        )

        result = NotificationService.create_notification(
            user, catalog.REFUND_REJECTED, title="t", body="b", idempotency_key="refund-1"
        )

        assert result.error_code == "DUPLICATE"
        assert Notification.objects.count() == 1


@pytest.mark.django_db
class TestSendToUser:
    @freeze_time("2026-10-17 12:00:00")
    def test_adds_timestamp(self, user, mock_push_task):
        result = NotificationService.send_to_user(
            user.id, catalog.REFUND_REJECTED, title="t", body="b", data={"refundRequestId": "r1"}
        )

        assert result.data.data == {
            "refundRequestId": "r1",
            "timestamp": "2026-10-17T12:00:00+00:00",
        }

    def test_unknown_user_is_noop(self, mock_push_task):
        result = NotificationService.send_to_user(
            "00000000-0000-0000-0000-000000000000", catalog.REFUND_REJECTED, title="t"
        )

        assert result.success
        assert result.data is None
        assert not Notification.objects.exists()

    def test_missing_user_id_is_noop(self):
        assert NotificationService.send_to_user(None, catalog.REFUND_REJECTED).data is None


@pytest.mark.django_db
class TestSendToAdmin:
    def test_notifies_operator_account(self, admin_recipient, fcm_enabled, mock_push_task):
        result = NotificationService.send_to_admin(
            catalog.THEATRE_ADDED, data={"ownerName": "PVR Owner", "theatreId": "t-1"}
        )

        notification = result.data
        assert notification.recipient == admin_recipient
        assert notification.body == "PVR Owner added a new theatre, kindly review it"
        assert NotificationDelivery.objects.get().status == DeliveryStatus.PENDING
        mock_push_task.assert_called_once()

    def test_missing_admin_is_noop(self, settings):
        settings.ADMIN_NOTIFICATION_EMAIL = "nobody@example.com"

        result = NotificationService.send_to_admin(catalog.THEATRE_ADDED, data={"ownerName": "x"})

        assert result.data is None
        assert not Notification.objects.exists()
