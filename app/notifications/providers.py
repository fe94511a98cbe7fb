"""
Push provider backed by Firebase Cloud Messaging.

The Firebase app is initialized lazily from settings.FCM_CREDENTIALS_FILE
the first time a message is sent. When settings.FCM_ENABLED is False the
service never enqueues push deliveries, so nothing here runs.

Errors are translated to DeliveryError so the Celery task can tell a dead
device token (permanent) from an FCM outage (transient).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

import firebase_admin
from django.conf import settings
from firebase_admin import credentials, exceptions as firebase_exceptions, messaging

logger = logging.getLogger(__name__)

CLICK_ACTION = "FLUTTER_NOTIFICATION_CLICK"
ANDROID_ICON = "app"

_init_lock = threading.Lock()


class DeliveryError(Exception):
    """Push delivery failure with a provider error code."""

    def __init__(self, message: str, code: str, is_permanent: bool = False):
        super().__init__(message)
        self.code = code
        self.is_permanent = is_permanent


def get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use."""
    with _init_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            credentials_file = getattr(settings, "FCM_CREDENTIALS_FILE", "")
            if credentials_file:
                cred = credentials.Certificate(credentials_file)
            else:
                # GOOGLE_APPLICATION_CREDENTIALS / metadata server
                cred = credentials.ApplicationDefault()
            logger.info("Initializing Firebase app for push delivery")
            return firebase_admin.initialize_app(cred)


def stringify_data(data: Mapping[str, Any] | None) -> dict[str, str]:
    """FCM data payloads only carry strings."""
    payload: dict[str, str] = {}
    for key, value in (data or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            payload[key] = "true" if value else "false"
        else:
            payload[key] = str(value)
    payload["click_action"] = CLICK_ACTION
    return payload


def build_message(
    token: str,
    title: str,
    body: str,
    data: Mapping[str, Any] | None,
    channel_id: str,
) -> messaging.Message:
    return messaging.Message(
        notification=messaging.Notification(title=title, body=body),
        data=stringify_data(data),
        token=token,
        android=messaging.AndroidConfig(
            priority="high",
            notification=messaging.AndroidNotification(
                channel_id=channel_id,
                default_sound=True,
                default_vibrate_timings=True,
                icon=ANDROID_ICON,
            ),
        ),
        apns=messaging.APNSConfig(
            payload=messaging.APNSPayload(
                aps=messaging.Aps(sound="default", badge=1),
            ),
        ),
    )


class FCMProvider:
    """Send push messages through firebase_admin.messaging."""

    @classmethod
    def send(
        cls,
        token: str,
        title: str,
        body: str,
        data: Mapping[str, Any] | None,
        channel_id: str,
    ) -> str:
        """
        Send one push message.

        Returns:
            FCM message name (projects/.../messages/...)

        Raises:
            DeliveryError: is_permanent for unregistered or invalid tokens
        """
        message = build_message(token, title, body, data, channel_id)
        try:
            return messaging.send(message, app=get_firebase_app())
        except (messaging.UnregisteredError, messaging.SenderIdMismatchError) as e:
            raise DeliveryError(str(e), code="unregistered", is_permanent=True) from e
        except firebase_exceptions.InvalidArgumentError as e:
            raise DeliveryError(str(e), code="invalid_token", is_permanent=True) from e
        except messaging.QuotaExceededError as e:
            raise DeliveryError(str(e), code="rate_limited") from e
        except firebase_exceptions.FirebaseError as e:
            raise DeliveryError(str(e), code="provider_unavailable") from e
