"""
Django app configuration for movies.
"""

from django.apps import AppConfig


class MoviesConfig(AppConfig):
    """Configuration for the movies application (theatres and bookings)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "movies"
    verbose_name = "Movies"

    def ready(self):
        import movies.signals  # noqa: F401
