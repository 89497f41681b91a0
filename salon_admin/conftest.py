import pytest
import requests
from django.apps import apps
from rest_framework.test import APIClient

from salon_admin.client.tokens import ACCESS_TOKEN_KEY
from salon_admin.client.tokens import REFRESH_TOKEN_KEY
from tests.admin_api import admin_api_transport
from tests.fakes import FakeTransport


@pytest.fixture(autouse=True)
def memory_store():
    config = apps.get_app_config("store")
    config.reset(seed=True)
    return config.repositories


@pytest.fixture
def transport() -> FakeTransport:
    return admin_api_transport()


@pytest.fixture
def fake_api(transport, monkeypatch) -> FakeTransport:
    """Send every ``requests.Session`` the web layer builds through ``transport``."""

    monkeypatch.setattr(requests.Session, "get_adapter", lambda self, url: transport)
    return transport


@pytest.fixture
def api_client(db) -> APIClient:
    return APIClient()


def _signed_in(access: str, refresh: str) -> APIClient:
    client = APIClient()
    client.cookies[ACCESS_TOKEN_KEY] = access
    client.cookies[REFRESH_TOKEN_KEY] = refresh
    return client


@pytest.fixture
def dashboard_client(db, fake_api) -> APIClient:
    return _signed_in("admin-access", "admin-refresh")


@pytest.fixture
def staff_client(db, fake_api) -> APIClient:
    return _signed_in("staff-access", "staff-refresh")
