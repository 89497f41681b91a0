from __future__ import annotations

from http import HTTPStatus
from typing import Any


class ApiError(Exception):
    """Base class for errors translated at the HTTP client boundary."""

    default_message = "An unexpected error occurred."

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        self.message = message or self.default_message
        self.status_code = status_code
        self.payload = payload
        super().__init__(self.message)


class AuthenticationError(ApiError):
    default_message = "Authentication failed. Please log in again."


class AuthorizationError(ApiError):
    default_message = "Access denied. Insufficient permissions."


class NotFoundError(ApiError):
    default_message = "Resource not found."


class ConflictError(ApiError):
    default_message = "Conflict occurred."


class ValidationError(ApiError):
    default_message = "Invalid data provided."


class ServerError(ApiError):
    default_message = "Internal server error. Please try again later."


class NetworkError(ApiError):
    default_message = "Network error. Please check your connection."


class UnknownError(ApiError):
    pass


_STATUS_ERRORS: dict[int, type[ApiError]] = {
    HTTPStatus.UNAUTHORIZED: AuthenticationError,
    HTTPStatus.FORBIDDEN: AuthorizationError,
    HTTPStatus.NOT_FOUND: NotFoundError,
    HTTPStatus.CONFLICT: ConflictError,
    HTTPStatus.UNPROCESSABLE_ENTITY: ValidationError,
}


def error_class_for_status(status_code: int) -> type[ApiError]:
    if status_code in _STATUS_ERRORS:
        return _STATUS_ERRORS[status_code]
    if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        return ServerError
    return UnknownError


def server_message(payload: Any) -> str | None:
    """Pull a human message out of an error body (``message`` or ``detail``)."""

    if not isinstance(payload, dict):
        return None
    for key in ("message", "detail"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def error_for_status(status_code: int, payload: Any = None) -> ApiError:
    error_class = error_class_for_status(status_code)
    message = server_message(payload)
    if message is None and error_class is UnknownError:
        message = f"Request failed with status {status_code}"
    return error_class(message, status_code=status_code, payload=payload)


# Real-time layer


class RealtimeError(Exception):
    """Base class for push-connection failures."""


class ConnectionTimeoutError(RealtimeError):
    pass


class HandshakeError(RealtimeError):
    pass


class ReconnectExhaustedError(RealtimeError):
    pass
