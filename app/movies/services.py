"""
Booking services for the movies app.

BookingConfirmationEmailService mails the customer a summary of a confirmed
booking. The app sends the booking details in the request, so nothing is
read from the database here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from django.utils import timezone

from core.exceptions import ValidationError
from core.services import BaseService
from toolkit.services.email import CUSTOMER_PROFILE, EmailService

CONFIRMATION_TEMPLATE = "emails/booking_confirmation"


@dataclass
class BookingConfirmation:
    to: str
    user_name: str = "Customer"
    booking_id: str = ""
    movie_title: str = ""
    theatre_name: str = ""
    show_date: str = ""
    show_time: str = ""
    selected_seats: list[str] = field(default_factory=list)
    amount: Decimal | str | int | float | None = 0
    payment_method: str = "Online"


def _format_amount(value) -> str:
    try:
        amount = Decimal(str(value or 0))
    except InvalidOperation:
        amount = Decimal("0")
    return f"{amount.quantize(Decimal('0.01'))}"


class BookingConfirmationEmailService(BaseService):
    """Send the "Your Booking is Confirmed" email."""

    @classmethod
    def send(cls, confirmation: BookingConfirmation) -> str:
        """
        Render and send the confirmation email.

        Returns:
            Message-ID of the sent email

        Raises:
            ValidationError: recipient is not an email address
            EmailDeliveryError: the mail server failed
        """
        logger = cls.get_logger()

        if not confirmation.to or "@" not in confirmation.to:
            raise ValidationError("Valid recipient email (to) is required")

        show_date = confirmation.show_date or timezone.now().date().isoformat()
        context = {
            "user_name": confirmation.user_name or "Customer",
            "booking_id": confirmation.booking_id,
            "movie_title": confirmation.movie_title,
            "theatre_name": confirmation.theatre_name,
            "show_date": show_date,
            "show_time": confirmation.show_time,
            "seats": ", ".join(str(seat) for seat in confirmation.selected_seats or []),
            "amount": _format_amount(confirmation.amount),
            "payment_method": confirmation.payment_method or "Online",
            "year": timezone.now().year,
        }
        subject = f"Movie Booking Confirmed • {confirmation.movie_title} • {show_date}"

        message_id = EmailService.send(
            to=confirmation.to,
            subject=subject,
            template_name=CONFIRMATION_TEMPLATE,
            context=context,
            profile=CUSTOMER_PROFILE,
        )
        logger.info(
            "Booking confirmation email sent",
            extra={"booking_id": confirmation.booking_id, "message_id": message_id},
        )
        return message_id
