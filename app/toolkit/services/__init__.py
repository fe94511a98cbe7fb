"""
Service classes for toolkit app.

This package contains service classes for common operations:
- EmailService: Email sending through named transport profiles

Usage:
    from toolkit.services import EmailService
    from toolkit.services.email import EmailService  # Alternative import
"""

from toolkit.services.email import EmailDeliveryError, EmailService

__all__ = ["EmailDeliveryError", "EmailService"]
