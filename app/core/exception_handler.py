"""
DRF exception handler for domain errors.

Views raise core.exceptions / payments.exceptions subclasses and this handler
turns them into typed JSON responses. Anything DRF already knows how to render
(serializer errors, authentication failures) is passed through unchanged.

Error kind to HTTP status:
    ValidationError            -> 400 (invalid-argument)
    PermissionDeniedError      -> 403
    NotFoundError              -> 404 (not-found)
    ConflictError and children -> 409 (failed-precondition)
    anything else              -> 500 (internal)
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; the first matching base class wins
STATUS_BY_ERROR_CLASS: list[tuple[type[BaseApplicationError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
]


def status_for_error(exc: BaseApplicationError) -> int:
    """Return the HTTP status code for a domain error."""
    status_code = getattr(exc, "http_status", None)
    if status_code:
        return status_code
    for error_class, mapped_status in STATUS_BY_ERROR_CLASS:
        if isinstance(exc, error_class):
            return mapped_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def application_exception_handler(exc, context):
    """Render BaseApplicationError subclasses, defer everything else to DRF."""
    if not isinstance(exc, BaseApplicationError):
        return exception_handler(exc, context)

    status_code = status_for_error(exc)
    view_name = context["view"].__class__.__name__ if context.get("view") else None
    log_extra = {"error_code": exc.error_code, "view": view_name}

    if status_code >= 500:
        logger.error(f"Request failed: {exc}", extra=log_extra)
    else:
        logger.info(f"Request rejected: {exc}", extra=log_extra)

    return Response(exc.to_dict(), status=status_code)
