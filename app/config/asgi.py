"""
ASGI config for the booking backend.

Exposes the ASGI callable as a module-level variable named ``application``
so the API can be served by Uvicorn alongside the WSGI entry point.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/asgi/
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_asgi_application()
