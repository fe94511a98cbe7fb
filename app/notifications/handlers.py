"""
Signal handlers for cross-app notification events.

Related files:
    - services.py: NotificationService for sending
    - tasks.py: Async push delivery
    - apps.py: Handler registration
    - movies/signals.py: Stashes the previous theatre status before save

Event Sources:
    - movies.Theatre created: admin is asked to review it
    - movies.Theatre Not Verified -> Verified / Disapproved: owner is told
    - authentication.VerificationDocument created: admin is asked to review it

A failing notification never fails the save that triggered it.
"""

from __future__ import annotations

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from authentication.models import VerificationDocument
from movies.models import Theatre, TheatreStatus

from notifications import catalog
from notifications.services import NotificationService

logger = logging.getLogger(__name__)

DEFAULT_THEATRE_NAME = "Your theatre"
DEFAULT_REJECTION_REASON = "No reason provided"


@receiver(post_save, sender=Theatre, dispatch_uid="notify_theatre_saved")
def on_theatre_saved(sender, instance: Theatre, created: bool, **kwargs):
    """Alert the admin about new theatres and the owner about review results."""
    try:
        if created:
            _notify_theatre_added(instance)
            return

        previous_status = getattr(instance, "_previous_status", None)
        if previous_status != TheatreStatus.NOT_VERIFIED or not instance.owner_id:
            return

        if instance.status == TheatreStatus.VERIFIED:
            _notify_theatre_approved(instance)
        elif instance.status == TheatreStatus.DISAPPROVED:
            _notify_theatre_rejected(instance)
    except Exception:
        logger.exception(
            "Error sending theatre notification",
            extra={"theatre_id": str(instance.id)},
        )


@receiver(post_save, sender=VerificationDocument, dispatch_uid="notify_verification_submitted")
def on_verification_submitted(sender, instance: VerificationDocument, created: bool, **kwargs):
    """Alert the admin when a user submits verification documents."""
    if not created:
        return
    try:
        user = instance.user
        user_name = user.name or "Unknown User"
        NotificationService.send_to_admin(
            catalog.VERIFICATION_SUBMITTED,
            data={
                "type": catalog.VERIFICATION_SUBMITTED,
                "userId": str(user.id),
                "userName": user_name,
                "userEmail": user.email or "No email",
            },
        )
        logger.info(f"Verification notification sent for user: {user.id}")
    except Exception:
        logger.exception(
            "Error in verification submitted notification",
            extra={"user_id": str(instance.user_id)},
        )


def _notify_theatre_added(theatre: Theatre) -> None:
    owner_name = theatre.name or "A Theatre Owner"
    if theatre.owner is not None and theatre.owner.name:
        owner_name = theatre.owner.name

    NotificationService.send_to_admin(
        catalog.THEATRE_ADDED,
        data={
            "type": catalog.THEATRE_ADDED,
            "theatreId": str(theatre.id),
            "ownerId": str(theatre.owner_id) if theatre.owner_id else "",
            "ownerName": owner_name,
        },
    )
    logger.info(f"Admin notified for new theatre: {theatre.id}")


def _notify_theatre_approved(theatre: Theatre) -> None:
    NotificationService.send_to_user(
        theatre.owner_id,
        catalog.THEATRE_APPROVED,
        data={
            "type": catalog.THEATRE_APPROVED,
            "theatreId": str(theatre.id),
            "theatreName": theatre.name or DEFAULT_THEATRE_NAME,
        },
    )
    logger.info(f"Theatre approval notification sent to owner: {theatre.owner_id}")


def _notify_theatre_rejected(theatre: Theatre) -> None:
    NotificationService.send_to_user(
        theatre.owner_id,
        catalog.THEATRE_REJECTED,
        data={
            "type": catalog.THEATRE_REJECTED,
            "theatreId": str(theatre.id),
            "theatreName": theatre.name or DEFAULT_THEATRE_NAME,
            "rejectionReason": theatre.rejection_reason or DEFAULT_REJECTION_REASON,
        },
    )
    logger.info(f"Theatre rejection notification sent to owner: {theatre.owner_id}")
