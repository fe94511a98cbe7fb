"""
Settlement and split-order records.

SettlementRecord is written once per booking when its payout transfer
succeeds. SplitOrder is written when the app asks for a Razorpay order whose
capture splits the payment automatically.

Both are append-only audit records; nothing updates them after creation.
"""

from __future__ import annotations

from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class SettlementRecord(UUIDPrimaryKeyMixin, BaseModel):
    """
    Money split of a settled booking.

    Fields:
        booking: Settled booking (one record per booking)
        total_paid: What the customer paid
        owner_share: Amount transferred to the owner's linked account
        platform_profit: What the platform kept (total_paid - owner_share)
        razorpay_payment_id: Payment the transfer was made from
        owner_account_id: Destination linked account
        transfer_id: Razorpay transfer id
        settled_at: When the transfer succeeded
    """

    booking = models.OneToOneField(
        "movies.MovieBooking",
        on_delete=models.PROTECT,
        related_name="settlement",
    )
    theatre = models.ForeignKey(
        "movies.Theatre",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="settlements",
    )
    total_paid = models.DecimalField(max_digits=12, decimal_places=2)
    owner_share = models.DecimalField(max_digits=12, decimal_places=2)
    platform_profit = models.DecimalField(max_digits=12, decimal_places=2)
    razorpay_payment_id = models.CharField(max_length=64)
    owner_account_id = models.CharField(max_length=64)
    transfer_id = models.CharField(max_length=64, blank=True, default="")
    settled_at = models.DateTimeField()

    class Meta:
        ordering = ["-settled_at"]
        verbose_name = "Settlement Record"
        verbose_name_plural = "Settlement Records"

    def __str__(self) -> str:
        return f"SettlementRecord({self.booking_id}, owner={self.owner_share})"


class SplitOrder(UUIDPrimaryKeyMixin, BaseModel):
    """
    Razorpay order created with a transfer to the theatre owner.

    booking_id and theatre_id are kept as plain strings: the order is created
    at checkout, before the booking row exists.
    """

    razorpay_order_id = models.CharField(max_length=64, unique=True)
    booking_id = models.CharField(max_length=64, db_index=True)
    theatre_id = models.CharField(max_length=64, null=True, blank=True)
    total_paid = models.DecimalField(max_digits=12, decimal_places=2)
    actual_ticket_price = models.DecimalField(max_digits=12, decimal_places=2)
    owner_share = models.DecimalField(max_digits=12, decimal_places=2)
    platform_profit = models.DecimalField(max_digits=12, decimal_places=2)
    owner_account_id = models.CharField(max_length=64)
    currency = models.CharField(max_length=3, default="INR")

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Split Order"
        verbose_name_plural = "Split Orders"

    def __str__(self) -> str:
        return f"SplitOrder({self.razorpay_order_id}, booking={self.booking_id})"
