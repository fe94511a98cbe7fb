"""
Celery tasks for notification delivery.

Tasks:
    send_push_notification: Deliver a notification via FCM

Design:
    - Tasks receive delivery_id (UUID string) instead of notification_id
    - Each task updates the NotificationDelivery status
    - Permanent vs transient errors are classified for retry logic
    - Tasks are idempotent: re-running on non-PENDING delivery is a no-op

Usage:
    from notifications.tasks import send_push_notification

    # Called automatically by NotificationService.create_notification()
    send_push_notification.delay(delivery_id="uuid-string")
"""

from __future__ import annotations

import logging

from celery import shared_task
from django.utils import timezone as django_timezone

from notifications.models import (
    DeliveryStatus,
    NotificationDelivery,
    SkipReason,
)
from notifications.providers import DeliveryError, FCMProvider

logger = logging.getLogger(__name__)


def _get_delivery(delivery_id: str) -> NotificationDelivery | None:
    """
    Fetch delivery with related notification.

    Returns None if delivery not found or not in PENDING status.
    """
    try:
        delivery = NotificationDelivery.objects.select_related(
            "notification",
            "notification__recipient",
            "notification__notification_type",
        ).get(id=delivery_id)

        if delivery.status != DeliveryStatus.PENDING:
            logger.info(f"Delivery {delivery_id} status is {delivery.status}, skipping")
            return None

        return delivery
    except NotificationDelivery.DoesNotExist:
        logger.warning(f"Delivery {delivery_id} not found")
        return None


def _mark_sent(delivery: NotificationDelivery, provider_message_id: str | None) -> None:
    delivery.status = DeliveryStatus.SENT
    delivery.sent_at = django_timezone.now()
    delivery.provider_message_id = provider_message_id
    delivery.attempt_count += 1
    delivery.save(
        update_fields=[
            "status",
            "sent_at",
            "provider_message_id",
            "attempt_count",
            "updated_at",
        ]
    )


def _mark_failed(delivery: NotificationDelivery, error: DeliveryError) -> None:
    delivery.status = DeliveryStatus.FAILED
    delivery.failed_at = django_timezone.now()
    delivery.failure_reason = str(error)
    delivery.failure_code = error.code
    delivery.is_permanent_failure = error.is_permanent
    delivery.attempt_count += 1
    delivery.save(
        update_fields=[
            "status",
            "failed_at",
            "failure_reason",
            "failure_code",
            "is_permanent_failure",
            "attempt_count",
            "updated_at",
        ]
    )


def _mark_skipped(delivery: NotificationDelivery, reason: str) -> None:
    delivery.status = DeliveryStatus.SKIPPED
    delivery.skipped_reason = reason
    delivery.save(update_fields=["status", "skipped_reason", "updated_at"])


@shared_task(
    bind=True,
    autoretry_for=(DeliveryError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_push_notification(self, delivery_id: str) -> bool:
    """
    Send a notification via FCM.

    Flow:
        1. Fetch delivery + notification
        2. Skip if status != PENDING
        3. Skip if the recipient no longer has a device token
        4. Send through FCMProvider on the type's Android channel
        5. On success: status=SENT, provider_message_id=X
        6. On permanent error: status=FAILED, is_permanent_failure=True
        7. On transient error: raise for retry

    Returns:
        True if sent successfully or skipped
    """
    delivery = _get_delivery(delivery_id)
    if delivery is None:
        return True

    notification = delivery.notification
    recipient = notification.recipient

    if not recipient.fcm_token:
        _mark_skipped(delivery, SkipReason.NO_DEVICE_TOKEN)
        logger.info(f"Push skipped for delivery {delivery_id}: recipient has no FCM token")
        return True

    logger.info(
        f"Sending push notification for delivery {delivery_id} to user {recipient.id}"
    )

    try:
        provider_message_id = FCMProvider.send(
            token=recipient.fcm_token,
            title=notification.title,
            body=notification.body,
            data=notification.data,
            channel_id=notification.notification_type.android_channel_id,
        )
    except DeliveryError as e:
        if e.is_permanent or self.request.retries >= self.max_retries:
            _mark_failed(delivery, e)
            logger.warning(
                f"Push notification failed for delivery {delivery_id}: {e.code} - {e}"
            )
            return False

        delivery.attempt_count += 1
        delivery.save(update_fields=["attempt_count", "updated_at"])
        logger.warning(
            f"Push notification transiently failed for delivery {delivery_id}: "
            f"{e.code} - {e}, will retry"
        )
        raise

    _mark_sent(delivery, provider_message_id)
    logger.info(
        f"Push notification sent for delivery {delivery_id}, "
        f"provider_message_id={provider_message_id}"
    )
    return True
