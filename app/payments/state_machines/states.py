"""
State enums for payment records.

These are Django TextChoices for database storage and admin integration.
RefundRequest drives its status with django-fsm; booking payout status is
advanced with conditional UPDATEs (see payments.services.payout_service).

State Machines Overview:

Booking payout:
    pending → processing → settled
    pending → processing → failed
    failed → pending (operator retry only)

RefundRequest:
    pending → approved → processed
    pending → approved → failed
    pending → rejected
"""

from django.db import models


class PayoutStatus(models.TextChoices):
    """
    Payout status of a booking.

    Terminal states: SETTLED, FAILED (FAILED can be re-driven by an operator)

    PROCESSING is held by exactly one worker between claiming the booking and
    recording the transfer result. A booking stuck in PROCESSING means the
    worker died mid-transfer and needs manual reconciliation.
    """

    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    SETTLED = "settled", "Settled"
    FAILED = "failed", "Failed"


class RefundRequestStatus(models.TextChoices):
    """
    States for the RefundRequest lifecycle.

    Terminal states: PROCESSED, REJECTED, FAILED

    State Flow:
        PENDING → APPROVED → PROCESSED
        PENDING → APPROVED → FAILED
        PENDING → REJECTED
    """

    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    PROCESSED = "processed", "Processed"
    REJECTED = "rejected", "Rejected"
    FAILED = "failed", "Failed"


class RefundAction(models.TextChoices):
    """Admin decision on a refund request."""

    APPROVE = "approve", "Approve"
    REJECT = "reject", "Reject"


class RefundRequester(models.TextChoices):
    """Who opened the refund request."""

    USER = "user", "User"
    ADMIN = "admin", "Admin"
