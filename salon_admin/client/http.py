"""Async HTTP client for the remote admin API.

Every request is dispatched through a shared ``requests.Session`` running in a
worker thread, so the event loop stays free while calls are in flight. The
client owns the single piece of mutual exclusion in the design: the in-flight
token refresh task that all concurrent 401s collapse onto.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from dataclasses import field
from http import HTTPStatus
from typing import TYPE_CHECKING
from typing import Any

import requests
from asgiref.sync import sync_to_async

from . import endpoints
from .exceptions import ApiError
from .exceptions import AuthenticationError
from .exceptions import NetworkError
from .exceptions import UnknownError
from .exceptions import error_for_status
from .exceptions import server_message

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Callable

    from .tokens import TokenStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_REFRESH_TIMEOUT = 10.0

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


@dataclass
class ApiRequest:
    method: str
    path: str
    params: dict[str, Any] | None = None
    json: Any = None
    # Set once the request has been resent after a refresh; a second 401 is final.
    retried: bool = False
    token: str | None = field(default=None, repr=False)


def _decode(response: requests.Response) -> Any:
    if response.status_code == HTTPStatus.NO_CONTENT or not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    """Bearer-authenticated client with one coalesced refresh-and-retry.

    ``on_session_expired`` is called whenever a refresh fails and the stored
    tokens have been cleared; the web layer uses it to send the user back to
    the login entry point.
    """

    def __init__(  # noqa: PLR0913
        self,
        base_url: str,
        tokens: TokenStore,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        refresh_timeout: float = DEFAULT_REFRESH_TIMEOUT,
        session: requests.Session | None = None,
        on_session_expired: Callable[[], None] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.tokens = tokens
        self.timeout = timeout
        self.refresh_timeout = refresh_timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        self.on_session_expired = on_session_expired
        self._refresh_task: asyncio.Task[str] | None = None

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    # Public request API

    async def request(  # noqa: PLR0913
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        retry: bool = True,
    ) -> Any:
        api_request = ApiRequest(
            method=method.upper(),
            path=path,
            params=params,
            json=json,
            retried=not retry,
        )
        return await self.dispatch(api_request)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def dispatch(self, api_request: ApiRequest) -> Any:
        api_request.token = self.tokens.get_access_token()
        response = await self._send(api_request)

        if response.status_code == HTTPStatus.UNAUTHORIZED and not api_request.retried:
            api_request.retried = True
            api_request.token = await self._token_after_unauthorized(api_request.token)
            response = await self._send(api_request)

        if response.ok:
            return _decode(response)

        payload = _decode(response)
        error = error_for_status(response.status_code, payload)
        logger.warning(
            "%s %s failed with %s: %s",
            api_request.method,
            api_request.path,
            response.status_code,
            error.message,
        )
        raise error

    # Token refresh

    async def refresh_access_token(self) -> str:
        """Return a fresh access token, sharing one refresh among all callers."""

        if self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self._perform_refresh())
        task = self._refresh_task
        try:
            return await asyncio.shield(task)
        finally:
            if self._refresh_task is task and task.done():
                self._refresh_task = None

    async def _token_after_unauthorized(self, sent_token: str | None) -> str:
        current = self.tokens.get_access_token()
        if self._refresh_task is None and current and current != sent_token:
            # Another request already refreshed while this one was in flight.
            return current
        return await self.refresh_access_token()

    async def _perform_refresh(self) -> str:
        refresh_token = self.tokens.get_refresh_token()
        if not refresh_token:
            self._expire_session()
            msg = "No refresh token available."
            raise AuthenticationError(msg)

        logger.info("Refreshing admin access token")
        try:
            response = await sync_to_async(
                self.session.post,
                thread_sensitive=False,
            )(
                self.url_for(endpoints.AUTH_REFRESH),
                json={"refreshToken": refresh_token},
                timeout=self.refresh_timeout,
            )
        except requests.RequestException as exc:
            self._expire_session()
            msg = "Session refresh failed. Please log in again."
            raise AuthenticationError(msg) from exc

        payload = _decode(response)
        token = payload.get("token") if isinstance(payload, dict) else None
        if not response.ok or not token:
            self._expire_session()
            msg = server_message(payload) or "Session refresh failed. Please log in again."
            raise AuthenticationError(
                msg,
                status_code=response.status_code,
                payload=payload,
            )

        self.tokens.set_tokens(token, payload.get("refreshToken"))
        logger.info("Admin access token refreshed")
        return token

    def _expire_session(self) -> None:
        logger.info("Admin session expired; clearing stored tokens")
        self.tokens.clear()
        if self.on_session_expired is not None:
            self.on_session_expired()

    # Transport

    async def _send(self, api_request: ApiRequest) -> requests.Response:
        headers: dict[str, str] = {}
        if api_request.token:
            headers["Authorization"] = f"Bearer {api_request.token}"

        send = sync_to_async(self.session.request, thread_sensitive=False)
        try:
            return await send(
                api_request.method,
                self.url_for(api_request.path),
                params=api_request.params,
                json=api_request.json,
                headers=headers,
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.warning("%s %s: no response: %s", api_request.method, api_request.path, exc)
            raise NetworkError from exc
        except requests.RequestException as exc:
            raise UnknownError(str(exc) or None) from exc


__all__ = ["ApiClient", "ApiError", "ApiRequest"]
