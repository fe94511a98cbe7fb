"""
Celery configuration for the booking backend.

Celery runs the work that must not block a request or a model save:
- Booking payouts triggered by booking creation
- Push notification delivery

Redis is both the message broker and the result backend. Tasks are
auto-discovered from the tasks.py module of every installed app.

Usage:
    from payments.tasks import process_booking_payout

    process_booking_payout.delay(str(booking.id))

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
