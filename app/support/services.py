"""
Support ticket acknowledgement.

Customers are answered from the customer mailbox, theatre owners and admins
from the owner mailbox.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone

from authentication.models import UserType
from core.exceptions import ExternalServiceError, NotFoundError, ValidationError
from core.services import BaseService
from support.models import SupportTicket, TicketStatus
from toolkit.services.email import CUSTOMER_PROFILE, OWNER_PROFILE, EmailDeliveryError, EmailService

ACKNOWLEDGEMENT_SUBJECT = "Support Ticket Update"
EMAIL_SENT_MESSAGE = "Email sent!"


def compose_acknowledgement(user_name: str, subject: str, admin_message: str = "") -> str:
    """Plain text body: the admin's answer if there is one, else the standard receipt."""
    lines = [f"Dear {user_name},", ""]
    if admin_message and admin_message.strip():
        lines.append(f"Admin Response: {admin_message.strip()}")
    else:
        lines.append(
            f"We have received your support ticket (Subject: {subject}). "
            "Our team will respond within 3 business days to your registered "
            "email/phone number."
        )
    lines += ["", "Thank you for contacting us!", "", "- BookMyBiz Support"]
    return "\n".join(lines)


class SupportAcknowledgementService(BaseService):
    @classmethod
    def acknowledge(cls, ticket_id, message: str = "") -> str:
        """
        Email the ticket owner and mark the ticket acknowledged.

        Returns:
            Message-ID of the sent email

        Raises:
            ValidationError: ticket_id missing
            NotFoundError: ticket or its user does not exist
            ExternalServiceError: email could not be sent
        """
        logger = cls.get_logger()

        if not ticket_id:
            raise ValidationError("Missing ticketId")

        try:
            ticket = (
                SupportTicket.objects.select_related("user").filter(pk=ticket_id).first()
            )
        except (DjangoValidationError, ValueError):
            ticket = None
        if ticket is None:
            raise NotFoundError("Support ticket not found")

        user = ticket.user
        if user is None:
            raise NotFoundError("User not found")

        profile = CUSTOMER_PROFILE if user.user_type == UserType.USER else OWNER_PROFILE
        body = compose_acknowledgement(user.name or "User", ticket.subject, message)

        try:
            message_id = EmailService.send_raw(
                to=ticket.user_email,
                subject=ACKNOWLEDGEMENT_SUBJECT,
                body_text=body,
                profile=profile,
            )
        except EmailDeliveryError as e:
            logger.warning(
                f"Support acknowledgement failed: {e.message}",
                extra={"ticket_id": str(ticket.id)},
            )
            raise ExternalServiceError(
                "Failed to send email", error_code="EMAIL_DELIVERY_FAILED"
            ) from e

        ticket.status = TicketStatus.ACKNOWLEDGED
        ticket.acknowledged_at = timezone.now()
        ticket.admin_response = (message or "").strip()
        ticket.save(update_fields=["status", "acknowledged_at", "admin_response", "updated_at"])

        logger.info(
            "Support ticket acknowledged",
            extra={"ticket_id": str(ticket.id), "profile": profile},
        )
        return message_id
