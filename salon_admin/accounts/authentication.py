from __future__ import annotations

from asgiref.sync import async_to_sync
from rest_framework import exceptions
from rest_framework.authentication import SessionAuthentication

from salon_admin.client.exceptions import AuthenticationError


class AdminTokenAuthentication(SessionAuthentication):
    """Resolve ``request.user`` from the remote API's current-user endpoint.

    The admin session is attached to the request by ``AdminSessionMiddleware``.
    Tokens travel in cookies, so unsafe methods get the same CSRF check as
    Django session authentication.
    """

    def authenticate(self, request):
        session = getattr(request._request, "admin_session", None)  # noqa: SLF001
        if session is None or not session.is_authenticated():
            return None

        try:
            user = async_to_sync(session.get_current_user)()
        except AuthenticationError as exc:
            raise exceptions.AuthenticationFailed(exc.message) from exc

        self.enforce_csrf(request)
        return (user, session.tokens.get_access_token())

    def authenticate_header(self, request):
        return 'Bearer realm="api"'
