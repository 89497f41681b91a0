import json
from io import StringIO

import pytest
from django.core.management import CommandError
from django.core.management import call_command

from salon_admin.client.tokens import ACCESS_TOKEN_KEY
from salon_admin.realtime.client import get_realtime_client_from_settings
from salon_admin.realtime.events import BOOKING_CREATED
from salon_admin.realtime.events import JOIN_ADMIN
from salon_admin.realtime.events import JOIN_SALON
from tests.fakes import FakeSocketIOClient
from tests.fakes import FakeSocketIOFactory

COMMAND_MODULE = "salon_admin.realtime.management.commands.listen_events"


class PushingClient(FakeSocketIOClient):
    """Delivers one booking push after a salon room is joined, then hangs up."""

    async def emit(self, event: str, *args) -> None:
        await super().emit(event, *args)
        if event == JOIN_SALON:
            await self.trigger(
                BOOKING_CREATED,
                {"type": BOOKING_CREATED, "data": {"id": 7}, "timestamp": None},
            )
            await self.trigger("disconnect", "io server disconnect")


class PushingFactory(FakeSocketIOFactory):
    def __call__(self, **options) -> FakeSocketIOClient:
        client = PushingClient(self.mode, **options)
        self.clients.append(client)
        return client


@pytest.fixture
def token_file(tmp_path):
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps({ACCESS_TOKEN_KEY: "admin-access"}))
    return path


def use_factory(monkeypatch, factory):
    def build(tokens):
        return get_realtime_client_from_settings(
            tokens,
            client_factory=factory,
            handshake_timeout=0.05,
        )

    monkeypatch.setattr(f"{COMMAND_MODULE}.get_realtime_client_from_settings", build)


def test_listen_events_requires_a_stored_token(tmp_path):
    with pytest.raises(CommandError, match="No stored admin token"):
        call_command("listen_events", f"--token-file={tmp_path / 'missing.json'}")


def test_listen_events_prints_pushes_until_server_disconnects(monkeypatch, token_file):
    factory = PushingFactory()
    use_factory(monkeypatch, factory)
    out = StringIO()

    call_command(
        "listen_events",
        "--admin",
        "--salon=3",
        f"--token-file={token_file}",
        stdout=out,
    )

    sio = factory.last
    assert sio.connect_calls[0][1]["auth"] == {"token": "admin-access"}
    assert (JOIN_ADMIN,) in sio.emitted
    assert (JOIN_SALON, {"salonId": "3"}) in sio.emitted
    assert len(factory.clients) == 1
    assert f'{BOOKING_CREATED} {{"id": 7}}' in out.getvalue()


def test_listen_events_reports_refused_handshake(monkeypatch, token_file):
    factory = FakeSocketIOFactory(mode="refuse")
    use_factory(monkeypatch, factory)

    with pytest.raises(CommandError, match="Connection refused"):
        call_command("listen_events", f"--token-file={token_file}", stdout=StringIO())

    assert factory.last.shutdown_called
