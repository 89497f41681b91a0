from __future__ import annotations

import getpass

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.core.management.base import CommandParser

from salon_admin.accounts.session import build_admin_session
from salon_admin.accounts.tokens import cli_token_store
from salon_admin.client.exceptions import ApiError


class Command(BaseCommand):
    help = "Log in to the admin API and keep the token pair for other commands"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--email", dest="email", required=True)
        parser.add_argument(
            "--password",
            dest="password",
            help="Plain-text password (omit to be prompted securely)",
        )
        parser.add_argument(
            "--token-file",
            dest="token_file",
            help="Where to store the tokens (defaults to SALON_TOKEN_FILE)",
        )

    def handle(self, *args, **options) -> None:
        password: str | None = options.get("password")
        if not password:
            password = getpass.getpass("Password: ")

        tokens = cli_token_store(options.get("token_file"))
        session = build_admin_session(tokens)
        try:
            user, _ = async_to_sync(session.login)(options["email"], password)
        except ApiError as exc:
            raise CommandError(exc.message) from exc
        finally:
            session.close()

        self.stdout.write(
            self.style.SUCCESS(f"Logged in as {user.email or user.id} ({user.role})"),
        )
