"""
Payments app configuration.

This app settles bookings with theatre owners and processes refunds:
- Razorpay Route transfers of the owner share
- Split checkout orders
- Refund requests reviewed by an admin
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"

    def ready(self):
        import payments.signals  # noqa: F401
