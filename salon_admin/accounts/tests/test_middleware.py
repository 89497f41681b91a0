from http import HTTPStatus

import pytest

from salon_admin.accounts.middleware import is_guarded_path

pytestmark = pytest.mark.django_db


def test_guarded_prefixes(settings):
    settings.DASHBOARD_GUARDED_PREFIXES = ["/api/v1/dashboard/", "/dashboard/"]

    assert is_guarded_path("/api/v1/dashboard/salons/")
    assert is_guarded_path("/dashboard/")
    assert not is_guarded_path("/api/v1/auth/login/")
    assert not is_guarded_path("/health/")


def test_api_request_without_session_gets_401(client, fake_api):
    response = client.get("/api/v1/dashboard/salons/", HTTP_ACCEPT="application/json")

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.json()["login_url"] == "/api/v1/auth/login/"
    assert fake_api.calls == []


def test_page_request_without_session_redirects_to_login(client, settings, fake_api):
    settings.DASHBOARD_GUARDED_PREFIXES = ["/dashboard/"]

    response = client.get("/dashboard/bookings/", HTTP_ACCEPT="text/html")

    assert response.status_code == HTTPStatus.FOUND
    assert response.url == "/api/v1/auth/login/?next=/dashboard/bookings/"


def test_unguarded_paths_pass_through(client, fake_api):
    response = client.get("/api/v1/auth/me/")

    # Reaches the view, which applies its own authentication.
    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response["WWW-Authenticate"] == 'Bearer realm="api"'


def test_signed_in_request_reaches_the_dashboard(dashboard_client):
    response = dashboard_client.get("/api/v1/dashboard/salons/")

    assert response.status_code == HTTPStatus.OK
