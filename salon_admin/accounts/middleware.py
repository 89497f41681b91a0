from __future__ import annotations

import logging
from http import HTTPStatus

from django.conf import settings
from django.contrib.auth.views import redirect_to_login
from django.http import JsonResponse

from salon_admin.client.tokens import ACCESS_TOKEN_KEY

from .session import build_admin_session
from .tokens import token_store_for_request

logger = logging.getLogger(__name__)


def is_guarded_path(path: str) -> bool:
    prefixes = getattr(settings, "DASHBOARD_GUARDED_PREFIXES", ())
    return any(path.startswith(prefix) for prefix in prefixes)


def deny_unauthenticated(request):
    """Send a request without a session to the login entry point."""

    if request.accepts("text/html") and not request.path.startswith("/api/"):
        return redirect_to_login(request.get_full_path(), settings.LOGIN_URL)
    return JsonResponse(
        {
            "detail": "Authentication credentials were not provided.",
            "login_url": settings.LOGIN_URL,
        },
        status=HTTPStatus.UNAUTHORIZED,
    )


class AdminSessionMiddleware:
    """Attach a request-scoped ``AdminSession`` and guard dashboard paths.

    Must sit after ``SessionMiddleware``. Cookie writes made by the token store
    during the request (login, refresh, logout) are flushed onto the response.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        # Load the session here: views drive the client through async_to_sync
        # and the session must not hit the database from the event loop.
        request.session.get(ACCESS_TOKEN_KEY)

        tokens, cookies = token_store_for_request(request)
        admin_session = build_admin_session(tokens)
        request.admin_session = admin_session
        try:
            if is_guarded_path(request.path) and not admin_session.is_authenticated():
                logger.debug("Refusing %s without an admin session", request.path)
                response = deny_unauthenticated(request)
            else:
                response = self.get_response(request)
        finally:
            admin_session.close()

        if admin_session.expired:
            # Refresh failed mid-request; drop the server-side session as well.
            logger.info("Ending expired admin session for %s", request.path)
            request.session.flush()
        cookies.apply(response)
        return response
