"""
Toolkit - shared services used across the booking apps.

Key components:
    - services/email.py: EmailService, sends templated mail through the
      customer or owner transport profile
    - helpers.py: mask_email for log output

Usage:
    from toolkit.services import EmailService, EmailDeliveryError

This app has no models.
"""
