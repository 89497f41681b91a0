import asyncio
import logging

import pytest
from asgiref.sync import async_to_sync

from salon_admin.client.exceptions import ConnectionTimeoutError
from salon_admin.client.exceptions import HandshakeError
from salon_admin.client.tokens import MemoryMedium
from salon_admin.client.tokens import TokenStore
from salon_admin.realtime.client import ConnectionStatus
from salon_admin.realtime.client import RealtimeClient
from salon_admin.realtime.client import get_realtime_client_from_settings
from salon_admin.realtime.events import BOOKING_CREATED
from salon_admin.realtime.events import JOIN_ADMIN
from salon_admin.realtime.events import JOIN_SALON
from salon_admin.realtime.events import LEAVE_SALON
from tests.fakes import FakeSocketIOFactory

MAX_ATTEMPTS = 3
BOOKING_PUSH = {
    "type": BOOKING_CREATED,
    "data": {"id": 42, "customerName": "Alice Johnson"},
    "timestamp": "2024-01-15T10:00:00Z",
}


@pytest.fixture
def tokens():
    return TokenStore(MemoryMedium({"admin_token": "access"}), MemoryMedium())


@pytest.fixture
def factory():
    return FakeSocketIOFactory()


def make_client(tokens, factory, **kwargs):
    kwargs.setdefault("max_reconnect_attempts", MAX_ATTEMPTS)
    kwargs.setdefault("handshake_timeout", 0.05)
    return RealtimeClient("wss://ws.test", tokens, client_factory=factory, **kwargs)


def test_connect_sends_token_and_transport_options(tokens, factory):
    client = make_client(tokens, factory, transports=["websocket"])

    async_to_sync(client.connect)()

    assert client.status is ConnectionStatus.CONNECTED
    assert client.is_connected()
    ((url, kwargs),) = factory.last.connect_calls
    assert url == "wss://ws.test"
    assert kwargs["auth"] == {"token": "access"}
    assert kwargs["transports"] == ["websocket"]
    assert factory.last.options["reconnection_attempts"] == MAX_ATTEMPTS


def test_connect_twice_makes_a_single_handshake(tokens, factory):
    client = make_client(tokens, factory)

    async def scenario():
        await client.connect()
        await client.connect()

    async_to_sync(scenario)()

    assert len(factory.clients) == 1
    assert len(factory.last.connect_calls) == 1


def test_connect_without_token_is_a_handshake_error(factory):
    client = make_client(TokenStore(MemoryMedium(), MemoryMedium()), factory)

    with pytest.raises(HandshakeError, match="No authentication token"):
        async_to_sync(client.connect)()

    assert factory.clients == []
    assert client.status is ConnectionStatus.DISCONNECTED


def test_handshake_timeout(tokens):
    factory = FakeSocketIOFactory(mode="timeout")
    client = make_client(tokens, factory)

    with pytest.raises(ConnectionTimeoutError):
        async_to_sync(client.connect)()

    assert client.status is ConnectionStatus.ERROR
    assert factory.last.shutdown_called


def test_refused_handshake(tokens):
    factory = FakeSocketIOFactory(mode="refuse")
    client = make_client(tokens, factory)

    with pytest.raises(HandshakeError, match="refused"):
        async_to_sync(client.connect)()

    assert client.status is ConnectionStatus.ERROR
    assert not client.is_connected()


def test_push_reaches_every_subscriber_until_unsubscribed(tokens, factory):
    client = make_client(tokens, factory)
    received = {"a": [], "b": [], "c": []}
    unsubscribe = {
        name: client.on(BOOKING_CREATED, events.append) for name, events in received.items()
    }

    async def scenario():
        await client.connect()
        await factory.last.trigger(BOOKING_CREATED, BOOKING_PUSH)
        unsubscribe["b"]()
        await factory.last.trigger(BOOKING_CREATED, BOOKING_PUSH)

    async_to_sync(scenario)()

    assert [len(events) for events in received.values()] == [2, 1, 2]
    event = received["a"][0]
    assert event.type == BOOKING_CREATED
    assert event.action == "created"
    assert event.data["customerName"] == "Alice Johnson"
    assert event.timestamp == "2024-01-15T10:00:00Z"
    assert client.subscriber_count(BOOKING_CREATED) == 2


def test_failing_subscriber_does_not_block_others(tokens, factory, caplog):
    client = make_client(tokens, factory)
    received = []

    def broken(event):
        msg = "boom"
        raise RuntimeError(msg)

    async def async_subscriber(event):
        received.append(event.type)

    client.on(BOOKING_CREATED, broken)
    client.on(BOOKING_CREATED, async_subscriber)

    async def scenario():
        await client.connect()
        await factory.last.trigger(BOOKING_CREATED, BOOKING_PUSH)

    with caplog.at_level(logging.ERROR, logger="salon_admin.realtime.client"):
        async_to_sync(scenario)()

    assert received == [BOOKING_CREATED]
    assert "Error in event callback for booking.created" in caplog.text


def test_exhausted_reconnects_move_status_to_error(tokens, factory):
    client = make_client(tokens, factory)

    async def scenario():
        await client.connect()
        sio = factory.last
        await sio.trigger("disconnect", "transport close")
        assert client.status is ConnectionStatus.CONNECTING
        for _ in range(MAX_ATTEMPTS):
            await sio.trigger("connect_error", "unreachable")
        await asyncio.sleep(0)
        return sio

    sio = async_to_sync(scenario)()

    assert client.status is ConnectionStatus.ERROR
    assert client.reconnect_attempts == MAX_ATTEMPTS
    assert sio.shutdown_called


def test_successful_reconnect_resets_attempts(tokens, factory):
    client = make_client(tokens, factory)

    async def scenario():
        await client.connect()
        sio = factory.last
        await sio.trigger("disconnect", "transport close")
        await sio.trigger("connect_error", "unreachable")
        assert client.reconnect_attempts == 1
        await sio.trigger("connect")

    async_to_sync(scenario)()

    assert client.status is ConnectionStatus.CONNECTED
    assert client.reconnect_attempts == 0


def test_disconnect_then_connect_resets_attempts(tokens, factory):
    client = make_client(tokens, factory)

    async def scenario():
        await client.connect()
        sio = factory.last
        await sio.trigger("disconnect", "transport close")
        await sio.trigger("connect_error", "unreachable")
        await sio.trigger("connect_error", "unreachable")
        assert client.reconnect_attempts == 2
        await client.disconnect()
        assert client.status is ConnectionStatus.DISCONNECTED
        await client.connect()

    async_to_sync(scenario)()

    assert client.reconnect_attempts == 0
    assert client.status is ConnectionStatus.CONNECTED
    assert len(factory.clients) == 2
    assert factory.clients[0].shutdown_called


def test_server_disconnect_stops_without_reconnecting(tokens, factory):
    client = make_client(tokens, factory)

    async def scenario():
        await client.connect()
        await factory.last.trigger("disconnect", "io server disconnect")

    async_to_sync(scenario)()

    assert client.status is ConnectionStatus.DISCONNECTED


def test_events_from_a_replaced_connection_are_ignored(tokens, factory):
    client = make_client(tokens, factory)
    received = []
    client.on(BOOKING_CREATED, received.append)

    async def scenario():
        await client.connect()
        old = factory.last
        await client.reconnect()
        await old.trigger(BOOKING_CREATED, BOOKING_PUSH)
        await factory.last.trigger(BOOKING_CREATED, BOOKING_PUSH)

    async_to_sync(scenario)()

    assert len(received) == 1
    assert client.subscriber_count(BOOKING_CREATED) == 1


def test_disconnect_drops_subscriptions(tokens, factory):
    client = make_client(tokens, factory)
    client.on(BOOKING_CREATED, lambda event: None)

    async def scenario():
        await client.connect()
        await client.disconnect()

    async_to_sync(scenario)()

    assert client.subscriber_count(BOOKING_CREATED) == 0


def test_rooms_connect_on_demand(tokens, factory):
    client = make_client(tokens, factory)

    async def scenario():
        await client.join_salon_room(1)
        await client.join_admin_room()
        await client.leave_salon_room(1)

    async_to_sync(scenario)()

    assert len(factory.clients) == 1
    assert factory.last.emitted == [
        (JOIN_SALON, {"salonId": 1}),
        (JOIN_ADMIN,),
        (LEAVE_SALON, {"salonId": 1}),
    ]


def test_send_while_disconnected_only_warns(tokens, factory, caplog):
    client = make_client(tokens, factory)

    with caplog.at_level(logging.WARNING, logger="salon_admin.realtime.client"):
        async_to_sync(client.send)("ping", {"n": 1})

    assert factory.clients == []
    assert "not connected" in caplog.text


def test_client_from_settings(tokens, settings, factory):
    settings.SALON_WS_URL = "wss://push.example.com"
    settings.SALON_REALTIME = {"HANDSHAKE_TIMEOUT": 3, "MAX_RECONNECT_ATTEMPTS": 7}

    client = get_realtime_client_from_settings(tokens, client_factory=factory)

    assert client.url == "wss://push.example.com"
    assert client.handshake_timeout == 3  # noqa: PLR2004
    assert client.max_reconnect_attempts == 7  # noqa: PLR2004
