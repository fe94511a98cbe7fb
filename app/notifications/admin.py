"""
Django admin configuration for notification models.

Notifications and their deliveries are a record of what was sent and are
read-only. Notification types can be deactivated or have their templates
edited.
"""

from django.contrib import admin

from notifications.models import Notification, NotificationDelivery, NotificationType


@admin.register(NotificationType)
class NotificationTypeAdmin(admin.ModelAdmin):
    list_display = ["key", "display_name", "android_channel_id", "is_active", "supports_push"]
    list_filter = ["is_active", "android_channel_id", "supports_push"]
    search_fields = ["key", "display_name"]
    ordering = ["key"]
    fieldsets = (
        (None, {"fields": ("key", "display_name", "is_active")}),
        ("Templates", {"fields": ("title_template", "body_template")}),
        ("Push", {"fields": ("supports_push", "android_channel_id")}),
    )


class NotificationDeliveryInline(admin.TabularInline):
    model = NotificationDelivery
    extra = 0
    can_delete = False
    fields = [
        "channel",
        "status",
        "attempt_count",
        "provider_message_id",
        "skipped_reason",
        "failure_code",
        "failure_reason",
        "sent_at",
    ]
    readonly_fields = fields


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Read-only view of notifications for support."""

    list_display = ["id", "notification_type", "recipient", "title", "is_read", "created_at"]
    list_filter = ["notification_type", "is_read"]
    search_fields = ["title", "body", "recipient__email"]
    raw_id_fields = ["recipient"]
    date_hierarchy = "created_at"
    inlines = [NotificationDeliveryInline]
    readonly_fields = [
        "notification_type",
        "recipient",
        "title",
        "body",
        "data",
        "idempotency_key",
        "created_at",
    ]

    def has_add_permission(self, request) -> bool:
        return False


@admin.register(NotificationDelivery)
class NotificationDeliveryAdmin(admin.ModelAdmin):
    list_display = ["id", "notification", "channel", "status", "attempt_count", "created_at"]
    list_filter = ["status", "channel", "skipped_reason", "is_permanent_failure"]
    search_fields = ["provider_message_id", "notification__recipient__email"]
    readonly_fields = [field.name for field in NotificationDelivery._meta.fields]

    def has_add_permission(self, request) -> bool:
        return False
