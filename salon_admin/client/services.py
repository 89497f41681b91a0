from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from . import endpoints

if TYPE_CHECKING:  # import for type checking only
    from .http import ApiClient


class ResourceApi:
    """list/get/create/update/delete over one admin collection."""

    collection: str = ""

    def __init__(self, client: ApiClient, collection: str | None = None) -> None:
        self.client = client
        if collection is not None:
            self.collection = collection

    async def list(self, params: dict[str, Any] | None = None) -> Any:
        return await self.client.get(self.collection, params=params or None)

    async def get(self, pk: int | str) -> Any:
        return await self.client.get(endpoints.detail(self.collection, pk))

    async def create(self, data: dict[str, Any]) -> Any:
        return await self.client.post(self.collection, json=data)

    async def update(self, pk: int | str, data: dict[str, Any]) -> Any:
        return await self.client.put(endpoints.detail(self.collection, pk), json=data)

    async def delete(self, pk: int | str) -> Any:
        return await self.client.delete(endpoints.detail(self.collection, pk))


class AuthApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def login(self, email: str, password: str) -> dict[str, Any]:
        # A 401 here means bad credentials, not an expired token.
        return await self.client.post(
            endpoints.AUTH_LOGIN,
            json={"email": email, "password": password},
            retry=False,
        )

    async def logout(self) -> Any:
        return await self.client.post(endpoints.AUTH_LOGOUT, retry=False)

    async def refresh(self) -> str:
        return await self.client.refresh_access_token()

    async def me(self) -> dict[str, Any]:
        return await self.client.get(endpoints.AUTH_ME)


class SalonsApi(ResourceApi):
    collection = endpoints.SALONS

    async def update_status(self, pk: int | str, status: str) -> Any:
        return await self.client.put(endpoints.salon_status(pk), json={"status": status})

    async def services(self, pk: int | str) -> Any:
        return await self.client.get(endpoints.salon_services(pk))

    async def staff(self, pk: int | str) -> Any:
        return await self.client.get(endpoints.salon_staff(pk))

    async def availability(
        self,
        pk: int | str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.client.get(endpoints.salon_availability(pk), params=params)


class BookingsApi(ResourceApi):
    collection = endpoints.BOOKINGS

    async def update_status(self, pk: int | str, status: str) -> Any:
        return await self.client.put(endpoints.booking_status(pk), json={"status": status})

    async def by_date(self, date: str, params: dict[str, Any] | None = None) -> Any:
        return await self.client.get(
            endpoints.BOOKINGS_BY_DATE,
            params={**(params or {}), "date": date},
        )

    async def by_salon(self, pk: int | str, params: dict[str, Any] | None = None) -> Any:
        return await self.client.get(endpoints.bookings_by_salon(pk), params=params)


class UsersApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list(self, params: dict[str, Any] | None = None) -> Any:
        return await self.client.get(endpoints.USERS, params=params)

    async def get(self, pk: int | str) -> Any:
        return await self.client.get(endpoints.detail(endpoints.USERS, pk))

    async def update(self, pk: int | str, data: dict[str, Any]) -> Any:
        return await self.client.put(endpoints.detail(endpoints.USERS, pk), json=data)

    async def favorites(self, pk: int | str) -> Any:
        return await self.client.get(endpoints.user_favorites(pk))


class PaymentsApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list(self, params: dict[str, Any] | None = None) -> Any:
        return await self.client.get(endpoints.PAYMENTS, params=params)

    async def get(self, pk: int | str) -> Any:
        return await self.client.get(endpoints.detail(endpoints.PAYMENTS, pk))

    async def refund(self, pk: int | str, reason: str | None = None) -> Any:
        return await self.client.post(endpoints.payment_refund(pk), json={"reason": reason})

    async def webhook_logs(self, params: dict[str, Any] | None = None) -> Any:
        return await self.client.get(endpoints.PAYMENTS_WEBHOOK_LOGS, params=params)


class AnalyticsApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def section(self, name: str, params: dict[str, Any] | None = None) -> Any:
        if name not in endpoints.ANALYTICS_SECTIONS:
            msg = f"Unknown analytics section: {name!r}"
            raise ValueError(msg)
        return await self.client.get(endpoints.analytics(name), params=params)

    async def overview(self, params: dict[str, Any] | None = None) -> Any:
        return await self.section("overview", params)

    async def bookings(self, params: dict[str, Any] | None = None) -> Any:
        return await self.section("bookings", params)

    async def revenue(self, params: dict[str, Any] | None = None) -> Any:
        return await self.section("revenue", params)

    async def salons(self, params: dict[str, Any] | None = None) -> Any:
        return await self.section("salons", params)

    async def services(self, params: dict[str, Any] | None = None) -> Any:
        return await self.section("services", params)

    async def users(self, params: dict[str, Any] | None = None) -> Any:
        return await self.section("users", params)

    async def export(self, params: dict[str, Any] | None = None) -> Any:
        return await self.section("export", params)


class NotificationsApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list(self, params: dict[str, Any] | None = None) -> Any:
        return await self.client.get(endpoints.NOTIFICATIONS, params=params)

    async def create(self, data: dict[str, Any]) -> Any:
        return await self.client.post(endpoints.NOTIFICATIONS, json=data)

    async def update(self, pk: int | str, data: dict[str, Any]) -> Any:
        return await self.client.put(endpoints.detail(endpoints.NOTIFICATIONS, pk), json=data)

    async def delete(self, pk: int | str) -> Any:
        return await self.client.delete(endpoints.detail(endpoints.NOTIFICATIONS, pk))

    async def send(self, data: dict[str, Any]) -> Any:
        return await self.client.post(endpoints.NOTIFICATIONS_SEND, json=data)


class ApiService:
    """Resource groups of the admin API over one ``ApiClient``."""

    def __init__(self, client: ApiClient, *, environment: str = "production") -> None:
        self.client = client
        self.environment = environment
        self.auth = AuthApi(client)
        self.salons = SalonsApi(client)
        self.services = ResourceApi(client, endpoints.SERVICES)
        self.staff = ResourceApi(client, endpoints.STAFF)
        self.bookings = BookingsApi(client)
        self.users = UsersApi(client)
        self.payments = PaymentsApi(client)
        self.analytics = AnalyticsApi(client)
        self.notifications = NotificationsApi(client)
        self.offers = ResourceApi(client, endpoints.OFFERS)

    @property
    def api_url(self) -> str:
        return self.client.base_url
