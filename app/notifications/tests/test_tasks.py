"""
Tests for the push delivery task.

FCMProvider.send is patched, so nothing reaches Firebase.
"""

import pytest

from notifications.models import AndroidChannel, DeliveryStatus, SkipReason
from notifications.providers import DeliveryError
from notifications.tasks import send_push_notification
from notifications.tests.factories import NotificationDeliveryFactory, NotificationTypeFactory


@pytest.mark.django_db
class TestSendPushNotification:
    def test_sends_on_type_channel(self, mock_fcm_send):
        delivery = NotificationDeliveryFactory(
            notification__notification_type=NotificationTypeFactory(
                android_channel_id=AndroidChannel.MOVIE_REFUND
            )
        )

        assert send_push_notification.apply(args=[str(delivery.id)]).get() is True

        kwargs = mock_fcm_send.call_args.kwargs
        assert kwargs["token"] == "fcm-device-token"
        assert kwargs["channel_id"] == "movie_refund_channel"
        assert kwargs["title"] == delivery.notification.title
        delivery.refresh_from_db()
        assert delivery.status == DeliveryStatus.SENT
        assert delivery.provider_message_id == "projects/bookmybiz/messages/0:1234"
        assert delivery.attempt_count == 1
        assert delivery.sent_at is not None

    def test_non_pending_delivery_is_noop(self, mock_fcm_send):
        delivery = NotificationDeliveryFactory(status=DeliveryStatus.SENT)

        assert send_push_notification.apply(args=[str(delivery.id)]).get() is True

        mock_fcm_send.assert_not_called()

    def test_unknown_delivery_is_noop(self, mock_fcm_send):
        assert send_push_notification.apply(args=["999999"]).get() is True

        mock_fcm_send.assert_not_called()

    def test_token_removed_since_enqueue(self, mock_fcm_send):
        delivery = NotificationDeliveryFactory(notification__recipient__fcm_token="")

        send_push_notification.apply(args=[str(delivery.id)])

        delivery.refresh_from_db()
        assert delivery.status == DeliveryStatus.SKIPPED
        assert delivery.skipped_reason == SkipReason.NO_DEVICE_TOKEN
        mock_fcm_send.assert_not_called()

    def test_permanent_failure_is_recorded(self, mock_fcm_send):
        mock_fcm_send.side_effect = DeliveryError(
            "Requested entity was not found", code="unregistered", is_permanent=True
        )
        delivery = NotificationDeliveryFactory()

        assert send_push_notification.apply(args=[str(delivery.id)]).get() is False

        delivery.refresh_from_db()
        assert delivery.status == DeliveryStatus.FAILED
        assert delivery.failure_code == "unregistered"
        assert delivery.is_permanent_failure is True
        assert mock_fcm_send.call_count == 1

    def test_transient_failure_retries_then_fails(self, mock_fcm_send):
        mock_fcm_send.side_effect = DeliveryError("FCM unavailable", code="provider_unavailable")
        delivery = NotificationDeliveryFactory()

        send_push_notification.apply(args=[str(delivery.id)])

        delivery.refresh_from_db()
        assert delivery.status == DeliveryStatus.FAILED
        assert delivery.is_permanent_failure is False
        assert mock_fcm_send.call_count == 4
