"""
RefundRequest model for customer-initiated booking cancellations.

A customer cancels a booking and asks for their money back; an admin then
approves or rejects the request. Approval refunds the full amount the
customer paid and tries to recover the owner's share from their linked
account.

Usage:
    from payments.models import RefundRequest

    refund_request.approve()   # pending -> approved
    refund_request.save()

    refund_request.mark_processed(refund_id="rfnd_1", refund_status="processed")
    refund_request.save()
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

from payments.state_machines import RefundRequester, RefundRequestStatus

DEFAULT_REFUND_REASON = "User requested cancellation"


class RefundRequest(UUIDPrimaryKeyMixin, BaseModel):
    """
    A customer's request to refund a booking.

    State Flow:
        PENDING -> APPROVED -> PROCESSED
        PENDING -> APPROVED -> FAILED
        PENDING -> REJECTED

    Amounts:
        amount: Total the customer paid; always refunded in full
        actual_ticket_price: Base ticket price recorded on the booking
        estimated_ticket_price: amount / 1.12, kept for when the booking
            has no recorded price (ticket_price_is_estimated)

    Show details (movie title, theatre name, seats, date) are copied from
    the app's request so the admin console can show them after the booking
    changes.
    """

    # ==========================================================================
    # Relationships
    # ==========================================================================

    booking = models.ForeignKey(
        "movies.MovieBooking",
        on_delete=models.PROTECT,
        related_name="refund_requests",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="refund_requests",
    )
    theatre = models.ForeignKey(
        "movies.Theatre",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="refund_requests",
    )

    # ==========================================================================
    # Amounts
    # ==========================================================================

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    actual_ticket_price = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )
    estimated_ticket_price = models.DecimalField(max_digits=12, decimal_places=2)
    ticket_price_is_estimated = models.BooleanField(
        default=False,
        help_text="True when no ticket price was recorded on the booking",
    )
    payment_id = models.CharField(
        max_length=64,
        help_text="Razorpay payment to refund (pay_xxx)",
    )

    # ==========================================================================
    # Request Details
    # ==========================================================================

    reason = models.CharField(max_length=255, default=DEFAULT_REFUND_REASON)
    show_date = models.CharField(max_length=32, blank=True, default="")
    movie_title = models.CharField(max_length=255, blank=True, default="")
    theatre_name = models.CharField(max_length=200, blank=True, default="")
    selected_seats = models.JSONField(default=list, blank=True)
    created_by = models.CharField(
        max_length=10,
        choices=RefundRequester.choices,
        default=RefundRequester.USER,
    )

    # ==========================================================================
    # State
    # ==========================================================================

    status = FSMField(
        default=RefundRequestStatus.PENDING,
        choices=RefundRequestStatus.choices,
        db_index=True,
        help_text="Current state of the request (managed by FSM)",
    )

    # ==========================================================================
    # Outcome
    # ==========================================================================

    admin_notes = models.TextField(blank=True, default="")
    processed_at = models.DateTimeField(null=True, blank=True)
    refund_id = models.CharField(max_length=64, blank=True, default="")
    refund_status = models.CharField(max_length=20, blank=True, default="")
    refund_breakdown = models.JSONField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Refund Request"
        verbose_name_plural = "Refund Requests"
        indexes = [
            models.Index(fields=["status", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"RefundRequest({self.id}, {self.status}, {self.amount})"

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=RefundRequestStatus.PENDING,
        target=RefundRequestStatus.APPROVED,
    )
    def approve(self, admin_notes: str = ""):
        """Admin approved; the refund call has not been made yet."""
        self.admin_notes = admin_notes

    @transition(
        field=status,
        source=RefundRequestStatus.PENDING,
        target=RefundRequestStatus.REJECTED,
    )
    def reject(self, admin_notes: str = ""):
        self.admin_notes = admin_notes
        self.processed_at = timezone.now()

    @transition(
        field=status,
        source=RefundRequestStatus.APPROVED,
        target=RefundRequestStatus.PROCESSED,
    )
    def mark_processed(
        self,
        refund_id: str,
        refund_status: str,
        breakdown: dict | None = None,
    ):
        """
        Refund accepted by Razorpay.

        Transition: APPROVED -> PROCESSED
        """
        self.refund_id = refund_id
        self.refund_status = refund_status
        self.refund_breakdown = breakdown
        self.processed_at = timezone.now()

    @transition(
        field=status,
        source=RefundRequestStatus.APPROVED,
        target=RefundRequestStatus.FAILED,
    )
    def fail(self, reason: str):
        """
        Refund call failed; the request waits for an admin.

        Transition: APPROVED -> FAILED
        """
        self.admin_notes = f"Razorpay refund failed: {reason}"
        self.processed_at = timezone.now()
