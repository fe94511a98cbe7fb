"""
Notification types known to the backend.

NotificationType rows are created from this catalog the first time a type
is used, so a fresh database needs no seeding. Admins can still deactivate
a type or edit its templates afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass

from notifications.models import AndroidChannel


@dataclass(frozen=True)
class NotificationTypeSpec:
    key: str
    display_name: str
    android_channel_id: str
    title_template: str = ""
    body_template: str = ""


# Admin alerts
THEATRE_ADDED = "theatre_added"
VERIFICATION_SUBMITTED = "verification_submitted"
MOVIE_REFUND_REQUEST = "movie_refund_request"

# Theatre owner
THEATRE_APPROVED = "theatre_approved"
THEATRE_REJECTED = "theatre_rejected"

# Customer
REFUND_REJECTED = "refund_rejected"
MOVIE_REFUND_PROCESSED = "movie_refund_processed"


CATALOG: dict[str, NotificationTypeSpec] = {
    spec.key: spec
    for spec in (
        NotificationTypeSpec(
            key=THEATRE_ADDED,
            display_name="New Theatre Added",
            android_channel_id=AndroidChannel.VERIFICATION,
            title_template="New Theatre Added",
            body_template="{ownerName} added a new theatre, kindly review it",
        ),
        NotificationTypeSpec(
            key=VERIFICATION_SUBMITTED,
            display_name="Verification Submitted",
            android_channel_id=AndroidChannel.VERIFICATION,
            title_template="New User Verification Submitted",
            body_template="User {userName} has submitted verification details for review",
        ),
        NotificationTypeSpec(
            key=MOVIE_REFUND_REQUEST,
            display_name="Movie Refund Request",
            android_channel_id=AndroidChannel.VERIFICATION,
            title_template="New Refund Request",
        ),
        NotificationTypeSpec(
            key=THEATRE_APPROVED,
            display_name="Theatre Approved",
            android_channel_id=AndroidChannel.THEATRE_STATUS,
            title_template="Theatre Approved! 🎉",
            body_template=(
                'Congratulations! Your theatre "{theatreName}" has been approved '
                "and is now visible to users."
            ),
        ),
        NotificationTypeSpec(
            key=THEATRE_REJECTED,
            display_name="Theatre Rejected",
            android_channel_id=AndroidChannel.THEATRE_STATUS,
            title_template="Theatre Review Update",
            body_template=(
                'Your theatre "{theatreName}" requires changes. Please review the '
                "feedback and resubmit."
            ),
        ),
        NotificationTypeSpec(
            key=REFUND_REJECTED,
            display_name="Refund Rejected",
            android_channel_id=AndroidChannel.MOVIE_REFUND,
            title_template="Refund Request Rejected",
        ),
        NotificationTypeSpec(
            key=MOVIE_REFUND_PROCESSED,
            display_name="Movie Refund Processed",
            android_channel_id=AndroidChannel.MOVIE_REFUND,
            title_template="Refund Processed Successfully",
        ),
    )
}
