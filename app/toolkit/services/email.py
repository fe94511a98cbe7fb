"""
Email service for transactional email.

Mail is sent through named transport profiles configured in
settings.EMAIL_TRANSPORT_PROFILES. Customers and theatre owners are mailed
from different mailboxes, each with its own SMTP login and From address:

    EMAIL_TRANSPORT_PROFILES = {
        "customer": {"HOST_USER": ..., "HOST_PASSWORD": ..., "FROM_EMAIL": ...},
        "owner": {...},
    }

Host, port, TLS and backend are shared (EMAIL_HOST, EMAIL_PORT,
EMAIL_USE_TLS, EMAIL_BACKEND).

Usage:
    from toolkit.services.email import EmailService

    message_id = EmailService.send(
        to="user@example.com",
        subject="Your booking is confirmed",
        template_name="emails/booking_confirmation",
        context={"movie_title": "Interstellar"},
        profile="customer",
    )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.core.mail.message import make_msgid
from django.template import TemplateDoesNotExist
from django.template.loader import render_to_string
from django.utils.html import strip_tags

from core.exceptions import ExternalServiceError
from toolkit.helpers import mask_email

logger = logging.getLogger(__name__)

CUSTOMER_PROFILE = "customer"
OWNER_PROFILE = "owner"


class EmailDeliveryError(ExternalServiceError):
    """The mail server rejected or could not accept a message."""

    default_error_code: str = "EMAIL_DELIVERY_FAILED"


@dataclass(frozen=True)
class TransportProfile:
    name: str
    host_user: str
    host_password: str
    from_email: str


def get_transport_profile(name: str) -> TransportProfile:
    """
    Load a transport profile from settings.

    Raises:
        EmailDeliveryError: profile is not configured
    """
    profiles = getattr(settings, "EMAIL_TRANSPORT_PROFILES", {}) or {}
    config = profiles.get(name)
    if config is None:
        raise EmailDeliveryError(
            f"Email transport profile not configured: {name}",
            error_code="EMAIL_PROFILE_NOT_CONFIGURED",
        )
    return TransportProfile(
        name=name,
        host_user=config.get("HOST_USER", ""),
        host_password=config.get("HOST_PASSWORD", ""),
        from_email=config.get("FROM_EMAIL") or settings.DEFAULT_FROM_EMAIL,
    )


class EmailService:
    """
    Send HTML + plain text email through a transport profile.

    Both send methods return the Message-ID of the sent message and raise
    EmailDeliveryError when the backend fails.
    """

    @staticmethod
    def send(
        to: str | list[str],
        subject: str,
        template_name: str,
        context: dict,
        profile: str = CUSTOMER_PROFILE,
        reply_to: str | None = None,
    ) -> str:
        """
        Send email using a template.

        Args:
            to: Recipient email address(es)
            subject: Email subject line
            template_name: Name of template (without extension)
                           Looks for: {template_name}.html and {template_name}.txt
            context: Template context variables
            profile: Transport profile name
            reply_to: Reply-to address

        Returns:
            Message-ID header of the sent message
        """
        html_content = render_to_string(f"{template_name}.html", context)
        try:
            text_content = render_to_string(f"{template_name}.txt", context)
        except TemplateDoesNotExist:
            text_content = strip_tags(html_content)

        return EmailService.send_raw(
            to=to,
            subject=subject,
            body_text=text_content,
            body_html=html_content,
            profile=profile,
            reply_to=reply_to,
        )

    @staticmethod
    def send_raw(
        to: str | list[str],
        subject: str,
        body_text: str,
        body_html: str | None = None,
        profile: str = CUSTOMER_PROFILE,
        reply_to: str | None = None,
    ) -> str:
        """
        Send email with raw content (no template).

        Returns:
            Message-ID header of the sent message
        """
        if isinstance(to, str):
            to = [to]

        transport = get_transport_profile(profile)
        connection = get_connection(
            username=transport.host_user or None,
            password=transport.host_password or None,
            fail_silently=False,
        )
        message_id = make_msgid()
        recipients = ", ".join(mask_email(address) for address in to)

        email = EmailMultiAlternatives(
            subject=subject,
            body=body_text,
            from_email=transport.from_email,
            to=to,
            reply_to=[reply_to] if reply_to else None,
            headers={"Message-ID": message_id},
            connection=connection,
        )
        if body_html:
            email.attach_alternative(body_html, "text/html")

        try:
            email.send(fail_silently=False)
        except Exception as e:
            logger.error(
                f"Failed to send email to {recipients}: {e}",
                extra={"profile": profile, "subject": subject},
                exc_info=True,
            )
            raise EmailDeliveryError(
                f"Error sending email: {e}",
                details={"profile": profile},
            ) from e

        logger.info(
            f"Email sent to {recipients}: {subject}",
            extra={"profile": profile, "message_id": message_id},
        )
        return message_id
