"""
Notification service layer.

Services:
    NotificationService: Notification creation and push dispatch

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - A missing recipient is a silent no-op for send_to_user / send_to_admin
    - Every notification is stored; the push delivery is PENDING (and a
      Celery task enqueued) only when the recipient has a device token and
      FCM is enabled, otherwise it is recorded as SKIPPED

Usage:
    from notifications.services import NotificationService

    NotificationService.send_to_admin(
        type_key="theatre_added",
        data={"theatreId": str(theatre.id), "ownerName": "PVR Owner"},
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from authentication.models import User
from core.services import BaseService, ServiceResult

from notifications.catalog import CATALOG
from notifications.models import (
    DeliveryChannel,
    DeliveryStatus,
    Notification,
    NotificationDelivery,
    NotificationType,
    SkipReason,
)

if TYPE_CHECKING:
    from typing import Any


class NotificationService(BaseService):
    """
    Service for notification operations.

    Methods:
        get_notification_type: Load a type, creating it from the catalog
        create_notification: Store a notification and dispatch its push
        send_to_user: Notify a user by id
        send_to_admin: Notify the operator account
    """

    @classmethod
    def get_notification_type(cls, type_key: str) -> NotificationType | None:
        """Return the type row, creating it from the catalog on first use."""
        spec = CATALOG.get(type_key)
        if spec is None:
            return NotificationType.objects.filter(key=type_key).first()

        notification_type, created = NotificationType.objects.get_or_create(
            key=type_key,
            defaults={
                "display_name": spec.display_name,
                "title_template": spec.title_template,
                "body_template": spec.body_template,
                "android_channel_id": spec.android_channel_id,
            },
        )
        if created:
            cls.get_logger().info(f"Registered notification type {type_key}")
        return notification_type

    @classmethod
    def create_notification(
        cls,
        recipient: User,
        type_key: str,
        data: dict | None = None,
        title: str | None = None,
        body: str | None = None,
        idempotency_key: str | None = None,
    ) -> ServiceResult[Notification]:
        """
        Create a notification for a user and dispatch its push delivery.

        If title/body are not provided, the type's templates are rendered
        with data. Explicit title/body override templates.

        Error codes:
            TYPE_NOT_FOUND: Notification type key doesn't exist
            TYPE_INACTIVE: Notification type is deactivated
            DUPLICATE: Notification with this idempotency_key already exists

        Raises:
            KeyError: If a template placeholder is missing from data
        """
        from notifications import tasks

        data = data or {}

        notification_type = cls.get_notification_type(type_key)
        if notification_type is None:
            cls.get_logger().warning(f"Notification type not found: {type_key}")
            return ServiceResult.failure(
                f"Notification type not found: {type_key}",
                error_code="TYPE_NOT_FOUND",
            )

        if not notification_type.is_active:
            cls.get_logger().info(
                f"Notification type inactive: {type_key} - skipping creation"
            )
            return ServiceResult.failure(
                f"Notification type is inactive: {type_key}",
                error_code="TYPE_INACTIVE",
            )

        if idempotency_key and Notification.objects.filter(
            idempotency_key=idempotency_key
        ).exists():
            cls.get_logger().info(
                f"Duplicate notification prevented: idempotency_key={idempotency_key}"
            )
            return ServiceResult.failure(
                f"Notification with idempotency_key already exists: {idempotency_key}",
                error_code="DUPLICATE",
            )

        rendered_title = title or notification_type.title_template.format(**data)
        rendered_body = body or notification_type.body_template.format(**data)

        with transaction.atomic():
            notification = Notification.objects.create(
                notification_type=notification_type,
                recipient=recipient,
                title=rendered_title,
                body=rendered_body,
                data=data,
                idempotency_key=idempotency_key,
            )

            delivery = None
            if notification_type.supports_push:
                delivery = NotificationDelivery(
                    notification=notification,
                    channel=DeliveryChannel.PUSH,
                )
                if not recipient.fcm_token:
                    delivery.status = DeliveryStatus.SKIPPED
                    delivery.skipped_reason = SkipReason.NO_DEVICE_TOKEN
                elif not getattr(settings, "FCM_ENABLED", False):
                    delivery.status = DeliveryStatus.SKIPPED
                    delivery.skipped_reason = SkipReason.PROVIDER_DISABLED
                delivery.save()

        cls.get_logger().info(
            f"Created notification {notification.id} of type {type_key} "
            f"for user {recipient.id}",
            extra={
                "delivery_status": delivery.status if delivery else None,
                "skipped_reason": delivery.skipped_reason if delivery else None,
            },
        )

        if delivery is not None and delivery.status == DeliveryStatus.PENDING:
            tasks.send_push_notification.delay(str(delivery.id))

        return ServiceResult.success(notification)

    @classmethod
    def send_to_user(
        cls,
        user_id,
        type_key: str,
        title: str | None = None,
        body: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> ServiceResult[Notification | None]:
        """
        Notify a user by id. Unknown users are a silent no-op.
        """
        recipient = User.objects.filter(pk=user_id).first() if user_id else None
        if recipient is None:
            cls.get_logger().info(
                "Notification recipient not found",
                extra={"user_id": str(user_id), "type_key": type_key},
            )
            return ServiceResult.success(None)
        return cls.create_notification(
            recipient,
            type_key,
            data=cls._with_timestamp(data),
            title=title,
            body=body,
        )

    @classmethod
    def send_to_admin(
        cls,
        type_key: str,
        title: str | None = None,
        body: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> ServiceResult[Notification | None]:
        """
        Notify the operator account (settings.ADMIN_NOTIFICATION_EMAIL).

        A missing admin account is a silent no-op.
        """
        recipient = User.objects.get_admin_recipient(settings.ADMIN_NOTIFICATION_EMAIL)
        if recipient is None:
            cls.get_logger().info("Admin user not found", extra={"type_key": type_key})
            return ServiceResult.success(None)
        return cls.create_notification(
            recipient,
            type_key,
            data=cls._with_timestamp(data),
            title=title,
            body=body,
        )

    @staticmethod
    def _with_timestamp(data: dict[str, Any] | None) -> dict[str, Any]:
        payload = dict(data or {})
        payload.setdefault("timestamp", timezone.now().isoformat())
        return payload
