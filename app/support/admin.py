"""
Support admin configuration.
"""

from django.contrib import admin

from support.models import SupportTicket


@admin.register(SupportTicket)
class SupportTicketAdmin(admin.ModelAdmin):
    list_display = ["subject", "user", "user_email", "status", "created_at", "acknowledged_at"]
    list_filter = ["status"]
    search_fields = ["subject", "user_email", "user__email"]
    raw_id_fields = ["user"]
    readonly_fields = ["acknowledged_at", "admin_response"]
