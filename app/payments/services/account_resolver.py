"""
Resolve the Razorpay linked account that receives a theatre's payouts.

The account id lives in the owner's payment details map. Several app
releases stored it under different keys, so the keys listed in
settings.PAYOUT_ACCOUNT_FIELD_CANDIDATES are scanned in order and the first
value that looks like a linked account id ("acc_...") wins.

A missing theatre, owner or account is an expected outcome and resolves to
None. Database errors are logged and also resolve to None.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError

from authentication.models import User
from core.services import BaseService
from movies.models import Theatre

ACCOUNT_ID_PREFIX = "acc_"

DEFAULT_ACCOUNT_FIELD_CANDIDATES = (
    "razorpayAccountId",
    "ownerAccountId",
    "accountId",
    "razorpay_account_id",
    "razorpay_accountId",
)


def is_connected_account_id(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(ACCOUNT_ID_PREFIX)


def account_field_candidates() -> tuple[str, ...]:
    return tuple(
        getattr(settings, "PAYOUT_ACCOUNT_FIELD_CANDIDATES", None)
        or DEFAULT_ACCOUNT_FIELD_CANDIDATES
    )


def find_connected_account_id(
    payment_details: Mapping[str, Any] | None,
    candidates: Iterable[str] | None = None,
) -> str | None:
    """Return the first candidate key holding a linked account id."""
    if not payment_details:
        return None
    for key in candidates if candidates is not None else account_field_candidates():
        value = payment_details.get(key)
        if is_connected_account_id(value):
            return value
    return None


class AccountResolver(BaseService):
    """
    Look up a theatre owner's linked account.

    Usage:
        account_id = AccountResolver.resolve(booking.theatre_id, booking.owner_id)
        if account_id is None:
            # owner has not registered a Razorpay account
    """

    @classmethod
    def resolve(cls, theatre_id, fallback_owner_id=None) -> str | None:
        """
        Resolve the linked account id for a theatre.

        Args:
            theatre_id: Theatre whose owner is paid
            fallback_owner_id: Owner to use when the theatre has none

        Returns:
            Linked account id, or None when it cannot be determined
        """
        if not theatre_id:
            return None

        try:
            theatre = Theatre.objects.filter(pk=theatre_id).only("id", "owner").first()
            if theatre is None:
                return None

            owner_id = theatre.owner_id or fallback_owner_id
            if not owner_id:
                return None

            owner = User.objects.filter(pk=owner_id).only("id", "payment_details").first()
            if owner is None:
                return None

            return find_connected_account_id(owner.payment_details)
        except (DatabaseError, DjangoValidationError, ValueError) as e:
            cls.get_logger().error(
                f"Error resolving theatre owner account ID: {e}",
                extra={"theatre_id": str(theatre_id)},
                exc_info=True,
            )
            return None
