"""
Tests for the support acknowledgement endpoint.
"""

import pytest
from django.core import mail

from support.tests.factories import SupportTicketFactory

URL = "/api/v1/support/acknowledgements/"


@pytest.fixture(autouse=True)
def email_settings(settings):
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"


@pytest.mark.django_db
class TestSupportAcknowledgementView:
    def test_email_sent(self, admin_client):
        ticket = SupportTicketFactory()

        response = admin_client.post(URL, {"ticketId": str(ticket.id)}, format="json")

        assert response.status_code == 200
        assert response.data == {"success": True, "message": "Email sent!"}
        assert len(mail.outbox) == 1

    def test_missing_ticket_id_is_400(self, admin_client):
        response = admin_client.post(URL, {"message": "Hello"}, format="json")

        assert response.status_code == 400
        assert response.data["error"] == "Missing ticketId"

    def test_unknown_ticket_is_404(self, admin_client):
        response = admin_client.post(
            URL, {"ticketId": "00000000-0000-0000-0000-000000000000"}, format="json"
        )

        assert response.status_code == 404
        assert response.data["error"] == "Support ticket not found"

    def test_send_failure_is_500(self, admin_client, mocker):
        ticket = SupportTicketFactory()
        mocker.patch(
            "toolkit.services.email.EmailMultiAlternatives.send",
            side_effect=OSError("SMTP down"),
        )

        response = admin_client.post(URL, {"ticketId": str(ticket.id)}, format="json")

        assert response.status_code == 500
        assert response.data["error"] == "Failed to send email"

    def test_customer_cannot_acknowledge(self, authenticated_client):
        ticket = SupportTicketFactory()

        response = authenticated_client.post(URL, {"ticketId": str(ticket.id)}, format="json")

        assert response.status_code == 403
