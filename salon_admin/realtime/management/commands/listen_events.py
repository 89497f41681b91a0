from __future__ import annotations

import asyncio
import json
import logging

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.core.management.base import CommandParser

from salon_admin.accounts.tokens import cli_token_store
from salon_admin.client.exceptions import RealtimeError
from salon_admin.realtime.client import ConnectionStatus
from salon_admin.realtime.client import get_realtime_client_from_settings
from salon_admin.realtime.events import PUSH_EVENTS

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Connect to the admin push channel and log every event until interrupted"

    # Seconds between connection status checks.
    poll_interval = 1.0

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--salon",
            dest="salons",
            action="append",
            default=[],
            help="Join this salon's room (repeatable)",
        )
        parser.add_argument(
            "--admin",
            dest="admin",
            action="store_true",
            help="Join the admin room",
        )
        parser.add_argument(
            "--token-file",
            dest="token_file",
            help="Token file written by dashboard_login (defaults to SALON_TOKEN_FILE)",
        )

    def handle(self, *args, **options) -> None:
        tokens = cli_token_store(options.get("token_file"))
        if not tokens.get_access_token():
            msg = "No stored admin token. Run dashboard_login first."
            raise CommandError(msg)

        client = get_realtime_client_from_settings(tokens)
        for event_name in PUSH_EVENTS:
            client.on(event_name, self.log_event)

        try:
            asyncio.run(self.listen(client, options["salons"], admin=options["admin"]))
        except KeyboardInterrupt:
            self.stdout.write("Stopped.")

    async def listen(self, client, salons: list[str], *, admin: bool) -> None:
        try:
            await client.connect()
            if admin:
                await client.join_admin_room()
            for salon_id in salons:
                await client.join_salon_room(salon_id)
            self.stdout.write(self.style.SUCCESS(f"Listening on {client.url}"))

            while client.status in (ConnectionStatus.CONNECTED, ConnectionStatus.CONNECTING):
                await asyncio.sleep(self.poll_interval)
            failed = client.status is ConnectionStatus.ERROR
        except RealtimeError as exc:
            raise CommandError(str(exc)) from exc
        finally:
            await client.disconnect()

        if failed:
            msg = "Real-time connection failed"
            raise CommandError(msg)

    def log_event(self, event) -> None:
        logger.info("Received %s", event.type)
        self.stdout.write(f"{event.type} {json.dumps(event.data, default=str)}")
