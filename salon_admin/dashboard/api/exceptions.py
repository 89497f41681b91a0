from __future__ import annotations

import logging
from http import HTTPStatus

from django.conf import settings
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler

from salon_admin.client.exceptions import ApiError
from salon_admin.client.exceptions import AuthenticationError
from salon_admin.client.exceptions import AuthorizationError
from salon_admin.client.exceptions import ConflictError
from salon_admin.client.exceptions import NetworkError
from salon_admin.client.exceptions import NotFoundError
from salon_admin.client.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Upstream client errors keep their status; everything else is a gateway failure.
ERROR_STATUS = {
    AuthenticationError: HTTPStatus.UNAUTHORIZED,
    AuthorizationError: HTTPStatus.FORBIDDEN,
    NotFoundError: HTTPStatus.NOT_FOUND,
    ConflictError: HTTPStatus.CONFLICT,
    ValidationError: HTTPStatus.BAD_REQUEST,
    NetworkError: HTTPStatus.SERVICE_UNAVAILABLE,
}


def _status_for(exc: ApiError) -> int:
    for error_class, status in ERROR_STATUS.items():
        if isinstance(exc, error_class):
            if error_class is ValidationError and exc.status_code:
                return exc.status_code
            return status
    return HTTPStatus.BAD_GATEWAY


def _field_errors(payload):
    if not isinstance(payload, dict):
        return None
    if "errors" in payload:
        return payload["errors"]
    return {k: v for k, v in payload.items() if k not in ("message", "detail")} or None


def api_exception_handler(exc, context):
    """DRF exception handler that also understands admin API client errors."""

    if isinstance(exc, ApiError):
        status = _status_for(exc)
        data = {"detail": exc.message}
        if isinstance(exc, ValidationError):
            errors = _field_errors(exc.payload)
            if errors:
                data["errors"] = errors
        if isinstance(exc, AuthenticationError):
            data["login_url"] = settings.LOGIN_URL
        if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.warning("Admin API failure surfaced as %s: %s", status, exc.message)
        return Response(data, status=status)

    response = exception_handler(exc, context)
    if response is not None and isinstance(
        exc,
        (exceptions.NotAuthenticated, exceptions.AuthenticationFailed),
    ):
        response.data["login_url"] = settings.LOGIN_URL
    return response
