import json
from io import StringIO

import pytest
from django.core.management import CommandError
from django.core.management import call_command

from salon_admin.client.tokens import ACCESS_TOKEN_KEY
from salon_admin.client.tokens import REFRESH_TOKEN_KEY
from tests.admin_api import ADMIN_PASSWORD


def test_dashboard_login_writes_token_file(fake_api, tmp_path):
    token_file = tmp_path / "tokens.json"
    out = StringIO()

    call_command(
        "dashboard_login",
        "--email=admin@salon.com",
        f"--password={ADMIN_PASSWORD}",
        f"--token-file={token_file}",
        stdout=out,
    )

    assert json.loads(token_file.read_text()) == {
        ACCESS_TOKEN_KEY: "admin-access",
        REFRESH_TOKEN_KEY: "admin-refresh",
    }
    assert "Logged in as admin@salon.com" in out.getvalue()


def test_dashboard_login_prompts_for_password(fake_api, tmp_path, monkeypatch):
    monkeypatch.setattr("getpass.getpass", lambda prompt: ADMIN_PASSWORD)
    token_file = tmp_path / "tokens.json"

    call_command(
        "dashboard_login",
        "--email=staff@salon.com",
        f"--token-file={token_file}",
        stdout=StringIO(),
    )

    assert json.loads(token_file.read_text())[ACCESS_TOKEN_KEY] == "staff-access"


def test_dashboard_login_rejects_bad_credentials(fake_api, tmp_path):
    token_file = tmp_path / "tokens.json"

    with pytest.raises(CommandError, match="Invalid credentials"):
        call_command(
            "dashboard_login",
            "--email=admin@salon.com",
            "--password=wrong",
            f"--token-file={token_file}",
        )

    assert not token_file.exists()
