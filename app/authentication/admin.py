"""
Django admin configuration for authentication models.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User, VerificationDocument


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for the email-identified User model."""

    list_display = (
        "email",
        "name",
        "user_type",
        "is_active",
        "is_staff",
        "date_joined",
    )
    list_filter = ("user_type", "is_active", "is_staff", "is_superuser")
    search_fields = ("email", "name")
    ordering = ("-date_joined",)
    readonly_fields = ("date_joined", "last_login")

    fieldsets = (
        (None, {"fields": ("email", "password", "name", "user_type")}),
        ("Devices & payments", {"fields": ("fcm_token", "payment_details")}),
        ("Status", {"fields": ("is_active", "is_staff", "is_superuser")}),
        ("Permissions", {"fields": ("groups", "user_permissions")}),
        ("Important dates", {"fields": ("date_joined", "last_login")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "name", "user_type", "password1", "password2"),
            },
        ),
    )


@admin.register(VerificationDocument)
class VerificationDocumentAdmin(admin.ModelAdmin):
    list_display = ("user", "document_type", "status", "created_at")
    list_filter = ("status", "document_type")
    search_fields = ("user__email", "user__name")
    raw_id_fields = ("user",)
