"""Socket.IO client for the admin API's push events.

Connection lifecycle::

    disconnected -> connecting -> connected
    connecting -> error            (failed handshake, reconnects exhausted)
    connected | error -> disconnected   (explicit disconnect)

Reconnection after a dropped connection is left to python-socketio; this
client only counts the failed attempts so it can give up and report ``error``
once the transport's bound is reached.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
import logging
from enum import Enum
from typing import TYPE_CHECKING
from typing import Any

import socketio
from django.conf import settings
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from salon_admin.client.exceptions import ConnectionTimeoutError
from salon_admin.client.exceptions import HandshakeError
from salon_admin.client.exceptions import ReconnectExhaustedError

from .events import JOIN_ADMIN
from .events import JOIN_SALON
from .events import LEAVE_ADMIN
from .events import LEAVE_SALON
from .events import PUSH_EVENTS
from .events import RealtimeEvent

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Awaitable
    from collections.abc import Callable
    from collections.abc import Iterable

    from salon_admin.client.tokens import TokenStore

    EventCallback = Callable[[RealtimeEvent], Awaitable[None] | None]

logger = logging.getLogger(__name__)

DEFAULT_HANDSHAKE_TIMEOUT = 10.0
DEFAULT_MAX_RECONNECT_ATTEMPTS = 5
DEFAULT_RECONNECT_DELAY = 1.0

# Disconnect reasons after which python-socketio does not reconnect by itself.
SERVER_DISCONNECT_REASONS = {"server disconnect", "io server disconnect"}


class ConnectionStatus(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class RealtimeClient:
    def __init__(  # noqa: PLR0913
        self,
        url: str,
        tokens: TokenStore,
        *,
        socketio_path: str = "socket.io",
        transports: Iterable[str] = ("websocket", "polling"),
        handshake_timeout: float = DEFAULT_HANDSHAKE_TIMEOUT,
        max_reconnect_attempts: int = DEFAULT_MAX_RECONNECT_ATTEMPTS,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        client_factory: Callable[..., Any] = socketio.AsyncClient,
    ) -> None:
        self.url = url
        self.tokens = tokens
        self.socketio_path = socketio_path
        self.transports = list(transports)
        self.handshake_timeout = handshake_timeout
        self.max_reconnect_attempts = max_reconnect_attempts
        self.reconnect_delay = reconnect_delay
        self._client_factory = client_factory

        self._sio: Any = None
        self._status = ConnectionStatus.DISCONNECTED
        self._reconnecting = False
        self._reconnect_attempts = 0
        self._teardown_task: asyncio.Task[None] | None = None
        self._subscribers: dict[str, dict[int, EventCallback]] = {}
        self._ids = itertools.count(1)

    # Queries

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    def is_connected(self) -> bool:
        return self._status is ConnectionStatus.CONNECTED and self._sio is not None

    # Lifecycle

    async def connect(self) -> None:
        if self._status in (ConnectionStatus.CONNECTED, ConnectionStatus.CONNECTING):
            return

        token = self.tokens.get_access_token()
        if not token:
            msg = "No authentication token available"
            raise HandshakeError(msg)

        self._status = ConnectionStatus.CONNECTING
        self._reconnecting = False
        self._reconnect_attempts = 0

        sio = self._client_factory(
            reconnection=True,
            reconnection_attempts=self.max_reconnect_attempts,
            reconnection_delay=self.reconnect_delay,
            reconnection_delay_max=self.reconnect_delay,
            randomization_factor=0,
            logger=False,
            engineio_logger=False,
        )
        self._sio = sio
        self._bind(sio)

        try:
            await asyncio.wait_for(
                sio.connect(
                    self.url,
                    auth={"token": token},
                    transports=self.transports,
                    socketio_path=self.socketio_path,
                    wait_timeout=self.handshake_timeout,
                ),
                timeout=self.handshake_timeout,
            )
        except asyncio.TimeoutError as exc:
            await self._abandon(sio)
            msg = f"Connection timeout after {self.handshake_timeout:g}s"
            logger.warning("Real-time connection to %s timed out", self.url)
            raise ConnectionTimeoutError(msg) from exc
        except SocketIOConnectionError as exc:
            await self._abandon(sio)
            msg = str(exc) or "Real-time handshake failed"
            logger.warning("Real-time handshake with %s failed: %s", self.url, msg)
            raise HandshakeError(msg) from exc

        self._status = ConnectionStatus.CONNECTED
        logger.info("Connected to real-time server %s", self.url)

    async def disconnect(self) -> None:
        """Close the connection and drop every local subscription."""

        self._subscribers.clear()
        await self._close()

    async def dispose(self) -> None:
        await self.disconnect()

    async def reconnect(self) -> None:
        """Reopen the connection, keeping subscriptions."""

        await self._close()
        await self.connect()

    async def _close(self) -> None:
        sio, self._sio = self._sio, None
        self._status = ConnectionStatus.DISCONNECTED
        self._reconnecting = False
        if sio is not None:
            await sio.shutdown()
            logger.info("Disconnected from real-time server")

    async def _abandon(self, sio: Any) -> None:
        if self._sio is sio:
            self._sio = None
        self._status = ConnectionStatus.ERROR
        self._reconnecting = False
        await sio.shutdown()

    # Subscriptions

    def on(self, event_name: str, callback: EventCallback) -> Callable[[], None]:
        """Register ``callback`` for ``event_name``; returns the unsubscribe function."""

        registrations = self._subscribers.setdefault(event_name, {})
        key = next(self._ids)
        registrations[key] = callback

        def unsubscribe() -> None:
            current = self._subscribers.get(event_name)
            if current is None:
                return
            current.pop(key, None)
            if not current:
                del self._subscribers[event_name]

        return unsubscribe

    def subscriber_count(self, event_name: str) -> int:
        return len(self._subscribers.get(event_name, {}))

    async def _dispatch(self, event_name: str, payload: Any) -> None:
        event = RealtimeEvent.from_payload(event_name, payload)
        for callback in list(self._subscribers.get(event_name, {}).values()):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:  # noqa: BLE001 - isolate subscribers
                logger.exception("Error in event callback for %s", event_name)

    # Rooms and commands

    async def join_salon_room(self, salon_id: int | str) -> None:
        if not self.is_connected():
            await self.connect()
        await self._emit(JOIN_SALON, {"salonId": salon_id})

    async def leave_salon_room(self, salon_id: int | str) -> None:
        await self._emit(LEAVE_SALON, {"salonId": salon_id})

    async def join_admin_room(self) -> None:
        if not self.is_connected():
            await self.connect()
        await self._emit(JOIN_ADMIN)

    async def leave_admin_room(self) -> None:
        await self._emit(LEAVE_ADMIN)

    async def send(self, event_name: str, data: Any = None) -> None:
        if not self.is_connected():
            logger.warning("Cannot send %s: not connected to real-time server", event_name)
            return
        await self._emit(event_name, data)

    async def _emit(self, event_name: str, data: Any = None) -> None:
        if self._sio is None:
            return
        if data is None:
            await self._sio.emit(event_name)
        else:
            await self._sio.emit(event_name, data)

    # Transport handlers

    def _bind(self, sio: Any) -> None:
        sio.on("connect", self._on_connect_handler(sio))
        sio.on("disconnect", self._on_disconnect_handler(sio))
        sio.on("connect_error", self._on_connect_error_handler(sio))
        for event_name in PUSH_EVENTS:
            sio.on(event_name, self._event_handler(sio, event_name))

    def _event_handler(self, sio: Any, event_name: str):
        async def handler(data: Any = None) -> None:
            if sio is self._sio:
                await self._dispatch(event_name, data)

        return handler

    def _on_connect_handler(self, sio: Any):
        async def handler() -> None:
            if sio is not self._sio:
                return
            if self._reconnecting:
                logger.info(
                    "Reconnected to real-time server after %d failed attempts",
                    self._reconnect_attempts,
                )
            self._reconnecting = False
            self._reconnect_attempts = 0
            self._status = ConnectionStatus.CONNECTED

        return handler

    def _on_disconnect_handler(self, sio: Any):
        async def handler(reason: Any = None) -> None:
            if sio is not self._sio:
                return
            logger.info("Real-time connection lost: %s", reason)
            if reason in SERVER_DISCONNECT_REASONS:
                self._sio = None
                self._status = ConnectionStatus.DISCONNECTED
                self._reconnecting = False
                return
            self._status = ConnectionStatus.CONNECTING
            self._reconnecting = True

        return handler

    def _on_connect_error_handler(self, sio: Any):
        async def handler(data: Any = None) -> None:
            # Handshake failures of connect() itself surface as exceptions there.
            if sio is not self._sio or not self._reconnecting:
                return
            self._reconnect_attempts += 1
            logger.warning(
                "Reconnect attempt %d/%d failed: %s",
                self._reconnect_attempts,
                self.max_reconnect_attempts,
                data,
            )
            if self._reconnect_attempts < self.max_reconnect_attempts:
                return
            msg = f"Gave up after {self._reconnect_attempts} reconnect attempts"
            error = ReconnectExhaustedError(msg)
            logger.error("Real-time connection failed: %s", error)
            self._sio = None
            self._status = ConnectionStatus.ERROR
            self._reconnecting = False
            # Runs outside the transport's reconnect loop, which invoked this handler.
            self._teardown_task = asyncio.ensure_future(sio.shutdown())

        return handler


def get_realtime_client_from_settings(tokens: TokenStore, **overrides: Any) -> RealtimeClient:
    """Build a client from ``SALON_WS_URL`` / ``SALON_WS_PATH`` / ``SALON_REALTIME``."""

    options = getattr(settings, "SALON_REALTIME", {})
    kwargs: dict[str, Any] = {
        "socketio_path": getattr(settings, "SALON_WS_PATH", "socket.io"),
        "transports": options.get("TRANSPORTS", ("websocket", "polling")),
        "handshake_timeout": options.get("HANDSHAKE_TIMEOUT", DEFAULT_HANDSHAKE_TIMEOUT),
        "max_reconnect_attempts": options.get(
            "MAX_RECONNECT_ATTEMPTS",
            DEFAULT_MAX_RECONNECT_ATTEMPTS,
        ),
        "reconnect_delay": options.get("RECONNECT_DELAY", DEFAULT_RECONNECT_DELAY),
    }
    kwargs.update(overrides)
    return RealtimeClient(settings.SALON_WS_URL, tokens, **kwargs)
