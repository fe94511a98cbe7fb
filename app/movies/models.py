"""
Theatre and booking models.

Models:
    Theatre: A cinema listed by a theatre owner, reviewed by the admin
    MovieBooking: A customer's ticket purchase for one show

Money:
    total_amount is what the customer paid (ticket price plus the 12%
    platform fee). actual_ticket_price is the base ticket price the owner
    is settled on; older app builds did not send it, so it is nullable.

Payout fields are written only by payments.services.payout_service;
refund fields only by payments.services.refund_service.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

from payments.state_machines import PayoutStatus

# Value the app writes when the owner account was not known at checkout
OWNER_ACCOUNT_PLACEHOLDER = "owner_placeholder"


class TheatreStatus(models.TextChoices):
    NOT_VERIFIED = "Not Verified", "Not Verified"
    VERIFIED = "Verified", "Verified"
    DISAPPROVED = "Disapproved", "Disapproved"


class PaymentMethod(models.TextChoices):
    ONLINE = "Online", "Online"
    OFFLINE = "Offline", "Offline"


class BookingStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    CANCELLED = "cancelled", "Cancelled"


class Theatre(UUIDPrimaryKeyMixin, BaseModel):
    """
    A theatre listed on the platform.

    New theatres start as Not Verified. The admin either verifies them or
    disapproves them with a reason; both decisions notify the owner.
    """

    name = models.CharField(max_length=200)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="theatres",
        help_text="Theatre owner who receives payouts",
    )
    city = models.CharField(max_length=100, blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=TheatreStatus.choices,
        default=TheatreStatus.NOT_VERIFIED,
        db_index=True,
    )
    rejection_reason = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class MovieBooking(UUIDPrimaryKeyMixin, BaseModel):
    """
    A confirmed (or cancelled) ticket booking.

    Creating an Online, confirmed booking triggers the payout to the
    theatre owner (see payments.signals).
    """

    # Who and where
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="movie_bookings",
    )
    theatre = models.ForeignKey(
        Theatre,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="bookings",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="Owner supplied by the app; used when the theatre has none",
    )

    # Show
    movie_title = models.CharField(max_length=255, blank=True, default="")
    show_date = models.CharField(max_length=32, blank=True, default="")
    show_time = models.CharField(max_length=32, blank=True, default="")
    selected_seats = models.JSONField(default=list, blank=True)

    # Payment
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.ONLINE,
    )
    status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.CONFIRMED,
        db_index=True,
    )
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    actual_ticket_price = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )
    razorpay_payment_id = models.CharField(max_length=64, blank=True, default="")
    theatre_owner_account_id = models.CharField(
        max_length=64, null=True, blank=True
    )

    # Payout
    payout_status = models.CharField(
        max_length=20,
        choices=PayoutStatus.choices,
        default=PayoutStatus.PENDING,
        db_index=True,
    )
    payout_failure_reason = models.TextField(blank=True, default="")
    payout_method = models.CharField(max_length=50, blank=True, default="")
    transfer_response = models.JSONField(null=True, blank=True)
    payout_settled_at = models.DateTimeField(null=True, blank=True)

    # Cancellation and refund
    cancelled_at = models.DateTimeField(null=True, blank=True)
    refund_status = models.CharField(max_length=20, blank=True, default="")
    refund_id = models.CharField(max_length=64, blank=True, default="")
    refunded_at = models.DateTimeField(null=True, blank=True)
    refund_breakdown = models.JSONField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["theatre", "payout_status"]),
        ]

    def __str__(self) -> str:
        return f"MovieBooking({self.id}, {self.movie_title}, {self.payout_status})"

    @property
    def is_payout_eligible(self) -> bool:
        return (
            self.payment_method == PaymentMethod.ONLINE
            and self.status == BookingStatus.CONFIRMED
        )
