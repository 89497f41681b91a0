"""Token mediums bound to a Django request.

The access/refresh pair lives in two places: HttpOnly cookies (short-lived,
sent by the browser) and the database-backed session (durable). Management
commands use an in-memory medium plus a JSON token file instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings

from salon_admin.client.tokens import TOKEN_KEYS
from salon_admin.client.tokens import JsonFileMedium
from salon_admin.client.tokens import MemoryMedium
from salon_admin.client.tokens import TokenStore

if TYPE_CHECKING:  # import for type checking only
    from pathlib import Path

    from django.contrib.sessions.backends.base import SessionBase
    from django.http import HttpRequest
    from django.http import HttpResponse


def _set_cookie(
    response: HttpResponse,
    name: str,
    value: str,
    max_age: int | None,
) -> None:
    if not value:
        return
    cookie_kwargs = {
        "httponly": True,
        "secure": getattr(settings, "SALON_TOKEN_COOKIE_SECURE", not settings.DEBUG),
        "samesite": getattr(settings, "SALON_TOKEN_COOKIE_SAMESITE", "Strict"),
        "path": "/",
    }
    if max_age is not None:
        cookie_kwargs["max_age"] = max_age
    response.set_cookie(name, value, **cookie_kwargs)


class CookieMedium:
    """Reads request cookies; writes are staged until :meth:`apply`."""

    def __init__(self, request: HttpRequest) -> None:
        self._values: dict[str, str] = {
            key: value for key, value in request.COOKIES.items() if key in TOKEN_KEYS
        }
        self._pending: dict[str, str | None] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key) or None

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._pending[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)
        self._pending[key] = None

    def apply(self, response: HttpResponse) -> None:
        max_ages = getattr(settings, "SALON_TOKEN_COOKIE_MAX_AGE", {})
        for key, value in self._pending.items():
            if value is None:
                response.delete_cookie(key, path="/")
            else:
                _set_cookie(response, key, value, max_ages.get(key))
        self._pending.clear()


class SessionMedium:
    def __init__(self, session: SessionBase) -> None:
        self.session = session

    def get(self, key: str) -> str | None:
        value = self.session.get(key)
        return value if isinstance(value, str) and value else None

    def set(self, key: str, value: str) -> None:
        self.session[key] = value

    def delete(self, key: str) -> None:
        self.session.pop(key, None)


def token_store_for_request(request: HttpRequest) -> tuple[TokenStore, CookieMedium]:
    """Return the request's token store plus its cookie medium (to flush later)."""

    cookies = CookieMedium(request)
    return TokenStore(cookies, SessionMedium(request.session)), cookies


def cli_token_store(path: str | Path | None = None) -> TokenStore:
    """Process-scoped store for management commands, persisted to ``SALON_TOKEN_FILE``."""

    return TokenStore(MemoryMedium(), JsonFileMedium(path or settings.SALON_TOKEN_FILE))
