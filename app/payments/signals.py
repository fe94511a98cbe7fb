"""
Django signals for payments app.

Creating an Online, confirmed MovieBooking enqueues its payout once the
creating transaction commits. Updates to a booking never trigger a payout.

Related files:
    - tasks.py: process_booking_payout
    - apps.py: Signal registration
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from movies.models import MovieBooking

logger = logging.getLogger(__name__)


def enqueue_booking_payout(booking_id) -> None:
    """Queue the payout task after the current transaction commits."""
    from payments.tasks import process_booking_payout

    transaction.on_commit(lambda: process_booking_payout.delay(str(booking_id)))


@receiver(post_save, sender=MovieBooking, dispatch_uid="payments_booking_created")
def on_booking_created(sender, instance: MovieBooking, created: bool, **kwargs):
    if not created or kwargs.get("raw"):
        return

    if not instance.is_payout_eligible:
        logger.info(
            "Booking created without payout",
            extra={
                "booking_id": str(instance.id),
                "payment_method": instance.payment_method,
                "status": instance.status,
            },
        )
        return

    enqueue_booking_payout(instance.id)
