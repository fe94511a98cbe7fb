"""
Django app configuration for support.
"""

from django.apps import AppConfig


class SupportConfig(AppConfig):
    """Configuration for the support application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "support"
    verbose_name = "Support"
