"""
Settlement arithmetic for ticket bookings.

Customers pay the base ticket price plus a 12% platform fee. The theatre
owner's share is computed from the base ticket price and the platform keeps
the rest. All functions here are pure and work on Decimal; gateway calls
receive integer minor units produced by to_minor_units().

Owner share ratio:
    OWNER_SHARE_RATIO is what is applied (the owner receives the full base
    ticket price). DOCUMENTED_OWNER_SHARE_RATIO is the 88% figure that
    product documents and older app copy still quote. The two disagree and
    the applied value stays at 100% until the business confirms otherwise.

Usage:
    from payments.services.settlement_calculator import SettlementCalculator

    split = SettlementCalculator.split(total=Decimal("500"), ticket_price=Decimal("440"))
    split.owner_share      # Decimal("440.00")
    split.platform_profit  # Decimal("60.00")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from payments.exceptions import PaymentValidationError

OWNER_SHARE_RATIO = Decimal("1")
DOCUMENTED_OWNER_SHARE_RATIO = Decimal("0.88")

PLATFORM_FEE_RATE = Decimal("0.12")

# Total amount divided by this gives the base ticket price when the
# booking did not record one
TICKET_PRICE_DIVISOR = Decimal("1") + PLATFORM_FEE_RATE

MINOR_UNITS_PER_MAJOR = 100
CENT = Decimal("0.01")


def to_amount(value: Any, field_name: str = "amount") -> Decimal:
    """
    Convert an input amount to a non-negative, finite Decimal.

    Floats are converted through str() so 0.1 stays 0.1.

    Raises:
        PaymentValidationError: value is missing, non-numeric, negative,
            NaN or infinite
    """
    if value is None or isinstance(value, bool):
        raise PaymentValidationError(
            f"Invalid {field_name}",
            details={field_name: value},
        )
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise PaymentValidationError(
            f"Invalid {field_name}",
            details={field_name: str(value)},
        )
    if not amount.is_finite() or amount < 0:
        raise PaymentValidationError(
            f"Invalid {field_name}",
            details={field_name: str(value)},
        )
    return amount


def to_minor_units(amount: Any) -> int:
    """Convert a major-unit amount to integer paise, rounding half up."""
    value = to_amount(amount) * MINOR_UNITS_PER_MAJOR
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount_minor: int) -> Decimal:
    """Convert integer paise reported by the gateway back to rupees."""
    return (Decimal(amount_minor) / MINOR_UNITS_PER_MAJOR).quantize(CENT)


@dataclass(frozen=True)
class TicketPrice:
    """
    Base ticket price of a booking.

    is_estimated is True when the price was derived from the total amount
    rather than read from the booking.
    """

    amount: Decimal
    is_estimated: bool


@dataclass(frozen=True)
class Settlement:
    total: Decimal
    ticket_price: Decimal
    owner_share: Decimal
    platform_profit: Decimal


class SettlementCalculator:
    """Pure settlement arithmetic. Inputs are validated, never clamped."""

    @staticmethod
    def owner_share(ticket_price: Any) -> Decimal:
        """Amount the theatre owner receives for a ticket price."""
        price = to_amount(ticket_price, "ticket price")
        return (price * OWNER_SHARE_RATIO).quantize(CENT, rounding=ROUND_HALF_UP)

    @staticmethod
    def platform_profit(total: Any, owner_share: Any) -> Decimal:
        """What the platform keeps once the owner has been paid."""
        return to_amount(total, "total amount") - to_amount(owner_share, "owner share")

    @staticmethod
    def estimate_ticket_price(total: Any) -> Decimal:
        """Base ticket price implied by a total that includes the platform fee."""
        return (to_amount(total, "total amount") / TICKET_PRICE_DIVISOR).quantize(
            CENT, rounding=ROUND_HALF_UP
        )

    @classmethod
    def resolve_ticket_price(cls, total: Any, actual_ticket_price: Any = None) -> TicketPrice:
        """
        Return the recorded ticket price, or the estimate when none exists.

        A recorded price of zero counts as missing.
        """
        if actual_ticket_price not in (None, ""):
            price = to_amount(actual_ticket_price, "ticket price")
            if price > 0:
                return TicketPrice(amount=price, is_estimated=False)
        return TicketPrice(amount=cls.estimate_ticket_price(total), is_estimated=True)

    @classmethod
    def split(cls, total: Any, ticket_price: Any) -> Settlement:
        """Compute owner share and platform profit for a booking."""
        total_amount = to_amount(total, "total amount")
        price = to_amount(ticket_price, "ticket price")
        owner_share = cls.owner_share(price)
        return Settlement(
            total=total_amount,
            ticket_price=price,
            owner_share=owner_share,
            platform_profit=cls.platform_profit(total_amount, owner_share),
        )


def display_amount(amount: Any) -> str:
    """Amount as shown to users: "112" for whole rupees, "98.50" otherwise."""
    value = to_amount(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    if value == value.to_integral_value():
        return str(value.to_integral_value())
    return str(value)
