"""
Notification system models.

This module defines the models for push notifications:
- NotificationType: Configuration for a notification type (templates, channel)
- Notification: Individual notification sent to a user
- NotificationDelivery: Per-channel delivery tracking

Design Decisions:
    - NotificationType uses integer PK (internal lookup table), rows are
      created on first use from notifications.catalog
    - NotificationType uses PROTECT (prevent deletion with existing notifications)
    - Notifications are stored even when nothing can be delivered, so the
      admin can see what a user would have been told
    - Delivery records track status per channel for retry/analytics

Usage:
    from notifications.models import Notification

    Notification.objects.filter(recipient=user, is_read=False)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel


# =============================================================================
# Enums
# =============================================================================


class DeliveryChannel(models.TextChoices):
    """Delivery channels for notifications."""

    PUSH = "push", "Push Notification"


class DeliveryStatus(models.TextChoices):
    """
    Status of a notification delivery attempt.

    State Flow:
        PENDING -> SENT
        PENDING -> FAILED (permanent error or retries exhausted)
        SKIPPED (no device token or provider disabled)
    """

    PENDING = "pending", "Pending"
    SENT = "sent", "Sent"
    FAILED = "failed", "Failed"
    SKIPPED = "skipped", "Skipped"


class SkipReason(models.TextChoices):
    """Standardized reasons for skipped deliveries."""

    NO_DEVICE_TOKEN = "no_device_token", "No device token"
    PROVIDER_DISABLED = "provider_disabled", "Push provider disabled"


class AndroidChannel(models.TextChoices):
    """Android notification channels registered by the mobile app."""

    VERIFICATION = "verification_channel", "Admin review"
    THEATRE_STATUS = "theatre_status_channel", "Theatre status"
    MOVIE_REFUND = "movie_refund_channel", "Movie refunds"


# =============================================================================
# Configuration Models
# =============================================================================


class NotificationType(models.Model):
    """
    Lookup table for notification type definitions.

    Fields:
        key: Unique programmatic identifier (e.g., "theatre_approved")
        display_name: Human-readable name for admin display
        title_template: Python format string for notification title
        body_template: Python format string for notification body
        is_active: Whether this notification type is currently enabled
        supports_push: Can be delivered via push notification (FCM)
        android_channel_id: Android channel the app shows the push on

    Note:
        - Templates use Python str.format() syntax: {placeholder}
        - Missing placeholders raise KeyError during rendering
    """

    key = models.CharField(
        max_length=100,
        unique=True,
        db_index=True,
        help_text="Unique programmatic identifier (e.g., 'theatre_approved')",
    )

    display_name = models.CharField(
        max_length=200,
        help_text="Human-readable name for admin display",
    )

    title_template = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="Python format string for title (e.g., 'Theatre {theatre_name}')",
    )

    body_template = models.TextField(
        blank=True,
        default="",
        help_text="Python format string for body",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this notification type is currently enabled",
    )

    supports_push = models.BooleanField(
        default=True,
        help_text="Can be delivered via push notification",
    )

    android_channel_id = models.CharField(
        max_length=50,
        choices=AndroidChannel.choices,
        default=AndroidChannel.MOVIE_REFUND,
        help_text="Android notification channel",
    )

    class Meta:
        db_table = "notifications_notification_type"
        verbose_name = "notification type"
        verbose_name_plural = "notification types"
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.display_name} ({self.key})"


class Notification(BaseModel):
    """
    Individual notification record for a user.

    Notifications are immutable once created - title and body are fully
    rendered strings serving as historical records.

    Fields:
        notification_type: FK to NotificationType (defines channel)
        recipient: User receiving the notification
        title: Fully rendered title string
        body: Fully rendered body string
        data: Context sent with the push (ids the app uses for deep links)
        is_read: Whether recipient has read this notification
    """

    notification_type = models.ForeignKey(
        NotificationType,
        on_delete=models.PROTECT,
        related_name="notifications",
        help_text="Type of this notification",
    )

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        db_index=True,
        help_text="User receiving this notification",
    )

    title = models.CharField(
        max_length=500,
        help_text="Fully rendered notification title",
    )

    body = models.TextField(
        blank=True,
        default="",
        help_text="Fully rendered notification body",
    )

    data = models.JSONField(
        default=dict,
        blank=True,
        help_text="Context data sent with the push message",
    )

    is_read = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether recipient has read this notification",
    )

    idempotency_key = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Idempotency key to prevent duplicate notifications",
    )

    class Meta:
        db_table = "notifications_notification"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["recipient", "is_read", "-created_at"],
                name="notif_recipient_unread_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["idempotency_key"],
                name="notif_idempotency_key_unique",
                condition=models.Q(idempotency_key__isnull=False),
            ),
        ]

    def __str__(self) -> str:
        read_status = "read" if self.is_read else "unread"
        return (
            f"Notification({self.notification_type.key}) -> "
            f"User {self.recipient_id} [{read_status}]"
        )


class NotificationDelivery(BaseModel):
    """
    Tracks delivery status for each channel of a notification.

    One NotificationDelivery record per (notification, channel) combination.

    Fields:
        notification: The notification being delivered
        channel: Delivery channel (push)
        status: Current delivery status
        attempt_count: Number of delivery attempts
        provider_message_id: Message name returned by FCM
        skipped_reason: Why delivery was skipped (if status=SKIPPED)
        failure_reason: Detailed error message if failed
        is_permanent_failure: Whether failure is permanent (no retry)
    """

    notification = models.ForeignKey(
        Notification,
        on_delete=models.CASCADE,
        related_name="deliveries",
    )

    channel = models.CharField(
        max_length=20,
        choices=DeliveryChannel.choices,
        default=DeliveryChannel.PUSH,
        help_text="Delivery channel",
    )

    status = models.CharField(
        max_length=20,
        choices=DeliveryStatus.choices,
        default=DeliveryStatus.PENDING,
        db_index=True,
        help_text="Current delivery status",
    )

    sent_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the notification was accepted by the provider",
    )

    failed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When delivery failed",
    )

    provider_message_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Message ID from provider (FCM)",
    )

    failure_reason = models.TextField(
        blank=True,
        default="",
        help_text="Detailed failure message",
    )

    failure_code = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Error code from provider",
    )

    is_permanent_failure = models.BooleanField(
        default=False,
        help_text="True if retry won't help (e.g., invalid token)",
    )

    attempt_count = models.PositiveSmallIntegerField(
        default=0,
        help_text="Number of delivery attempts",
    )

    skipped_reason = models.CharField(
        max_length=30,
        choices=SkipReason.choices,
        blank=True,
        default="",
        help_text="Reason if status=SKIPPED",
    )

    class Meta:
        db_table = "notifications_notification_delivery"
        verbose_name = "notification delivery"
        verbose_name_plural = "notification deliveries"
        constraints = [
            models.UniqueConstraint(
                fields=["notification", "channel"],
                name="unique_notification_channel",
            ),
        ]
        indexes = [
            models.Index(
                fields=["status", "channel", "-created_at"],
                name="notif_delivery_status_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Delivery({self.notification_id}, {self.channel}, {self.status})"
