"""
Celery tasks for booking payouts.

Tasks:
    process_booking_payout: Settle one booking's owner share

The task is enqueued by payments.signals when an eligible booking is
created, and by the "Retry payout" admin action. It never retries on its
own: PayoutService records every failure on the booking and an admin
decides whether to run it again.

Usage:
    from payments.tasks import process_booking_payout

    process_booking_payout.delay(str(booking.id))
"""

from __future__ import annotations

import logging
from uuid import UUID

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(bind=True, acks_late=True)
def process_booking_payout(self, booking_id: str) -> dict:
    """
    Settle the payout of a booking.

    Safe to run more than once for the same booking; only one run claims
    the booking and calls Razorpay.

    Returns:
        Dict with:
        - status: "settled", "skipped", "failed" or "not_found"
        - booking_id: The booking processed
        - transfer_id: Razorpay transfer id when settled
        - error / error_code: When failed
    """
    from payments.services import PayoutService

    try:
        booking_uuid = UUID(str(booking_id))
    except ValueError:
        logger.error(f"Invalid booking_id format: {booking_id}")
        return {"status": "not_found", "booking_id": str(booking_id)}

    logger.info(
        "Processing booking payout task",
        extra={"booking_id": str(booking_uuid), "task_id": self.request.id},
    )

    result = PayoutService.process_booking(booking_uuid)

    if not result.success:
        status = "not_found" if result.error_code == "NOT_FOUND" else "failed"
        return {
            "status": status,
            "booking_id": str(booking_uuid),
            "error": result.error,
            "error_code": result.error_code,
        }

    outcome = result.data
    if outcome.skipped:
        return {
            "status": "skipped",
            "booking_id": str(booking_uuid),
            "payout_status": outcome.payout_status,
        }

    return {
        "status": "settled",
        "booking_id": str(booking_uuid),
        "transfer_id": outcome.transfer_id,
    }
