"""
Movies admin configuration.

Theatre review decisions made here go through Theatre.save(), so the
approval and disapproval notifications fire the same way as from the app.
Payout fields on bookings are read-only; a failed payout is re-driven with
the "Retry payout" action.
"""

from django.contrib import admin, messages

from movies.models import MovieBooking, Theatre
from payments.services import PayoutService
from payments.signals import enqueue_booking_payout
from payments.state_machines import PayoutStatus


@admin.register(Theatre)
class TheatreAdmin(admin.ModelAdmin):
    list_display = ["name", "owner", "city", "status", "created_at"]
    list_filter = ["status", "city"]
    search_fields = ["name", "owner__email", "city"]
    raw_id_fields = ["owner"]
    ordering = ["name"]


@admin.register(MovieBooking)
class MovieBookingAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "movie_title",
        "theatre",
        "user",
        "total_amount",
        "payment_method",
        "status",
        "payout_status",
        "refund_status",
        "created_at",
    ]
    list_filter = ["payout_status", "status", "payment_method", "refund_status"]
    search_fields = ["id", "movie_title", "razorpay_payment_id", "user__email"]
    raw_id_fields = ["user", "theatre", "owner"]
    date_hierarchy = "created_at"
    readonly_fields = [
        "payout_status",
        "payout_failure_reason",
        "payout_method",
        "transfer_response",
        "payout_settled_at",
        "refund_status",
        "refund_id",
        "refunded_at",
        "refund_breakdown",
    ]
    actions = ["retry_payout"]

    @admin.action(description="Retry payout")
    def retry_payout(self, request, queryset):
        retried = 0
        for booking in queryset.filter(payout_status=PayoutStatus.FAILED):
            if PayoutService.reset_failed_payout(booking.id):
                enqueue_booking_payout(booking.id)
                retried += 1

        skipped = queryset.count() - retried
        if retried:
            self.message_user(request, f"{retried} payout(s) queued for retry.")
        if skipped:
            self.message_user(
                request,
                f"{skipped} booking(s) skipped: only failed payouts can be retried.",
                level=messages.WARNING,
            )
