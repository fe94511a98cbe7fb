"""
Payment admin configuration.

Settlement and split-order records are audit data: read-only and never
deleted. Refund requests are decided through the process endpoint (or the
admin actions below), which go through RefundService.
"""

from django.contrib import admin, messages

from payments.exceptions import PaymentError
from payments.models import RefundRequest, SettlementRecord, SplitOrder
from payments.services import RefundService
from payments.state_machines import RefundAction, RefundRequestStatus

__all__ = [
    "RefundRequestAdmin",
    "SettlementRecordAdmin",
    "SplitOrderAdmin",
]


class ReadOnlyAuditAdmin(admin.ModelAdmin):
    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        """Disable delete (audit trail)."""
        return False


@admin.register(SettlementRecord)
class SettlementRecordAdmin(ReadOnlyAuditAdmin):
    list_display = [
        "booking",
        "theatre",
        "total_paid",
        "owner_share",
        "platform_profit",
        "transfer_id",
        "settled_at",
    ]
    search_fields = ["booking__id", "razorpay_payment_id", "transfer_id", "owner_account_id"]
    date_hierarchy = "settled_at"
    ordering = ["-settled_at"]


@admin.register(SplitOrder)
class SplitOrderAdmin(ReadOnlyAuditAdmin):
    list_display = [
        "razorpay_order_id",
        "booking_id",
        "total_paid",
        "owner_share",
        "platform_profit",
        "currency",
        "created_at",
    ]
    list_filter = ["currency"]
    search_fields = ["razorpay_order_id", "booking_id", "owner_account_id"]
    ordering = ["-created_at"]


@admin.register(RefundRequest)
class RefundRequestAdmin(admin.ModelAdmin):
    """
    Admin configuration for RefundRequest.

    Status changes happen only through the approve/reject actions.
    """

    list_display = [
        "id",
        "user",
        "movie_title",
        "theatre_name",
        "amount",
        "ticket_price_is_estimated",
        "status",
        "created_at",
    ]
    list_filter = ["status", "ticket_price_is_estimated", "created_at"]
    search_fields = ["id", "user__email", "payment_id", "refund_id", "booking__id"]
    readonly_fields = [
        "id",
        "booking",
        "user",
        "theatre",
        "amount",
        "actual_ticket_price",
        "estimated_ticket_price",
        "ticket_price_is_estimated",
        "payment_id",
        "status",
        "processed_at",
        "refund_id",
        "refund_status",
        "refund_breakdown",
        "created_at",
        "updated_at",
    ]
    actions = ["approve_selected", "reject_selected"]
    ordering = ["-created_at"]

    fieldsets = (
        (None, {"fields": ("id", "booking", "user", "theatre", "status")}),
        (
            "Amounts",
            {
                "fields": (
                    "amount",
                    "actual_ticket_price",
                    "estimated_ticket_price",
                    "ticket_price_is_estimated",
                    "payment_id",
                ),
            },
        ),
        (
            "Request",
            {
                "fields": (
                    "reason",
                    "movie_title",
                    "theatre_name",
                    "show_date",
                    "selected_seats",
                ),
            },
        ),
        (
            "Outcome",
            {
                "fields": (
                    "admin_notes",
                    "processed_at",
                    "refund_id",
                    "refund_status",
                    "refund_breakdown",
                ),
            },
        ),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )

    def has_delete_permission(self, request, obj=None) -> bool:
        return False

    def _process(self, request, queryset, action: str) -> None:
        done = 0
        for refund_request in queryset.filter(status=RefundRequestStatus.PENDING):
            try:
                RefundService.process_request(refund_request.id, action)
            except PaymentError as e:
                self.message_user(
                    request,
                    f"{refund_request.id}: {e.message}",
                    level=messages.ERROR,
                )
                continue
            done += 1
        self.message_user(request, f"{done} refund request(s) {action}d.")

    @admin.action(description="Approve and refund selected requests")
    def approve_selected(self, request, queryset):
        self._process(request, queryset, RefundAction.APPROVE)

    @admin.action(description="Reject selected requests")
    def reject_selected(self, request, queryset):
        self._process(request, queryset, RefundAction.REJECT)
