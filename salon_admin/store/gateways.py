"""Gateways behind the dashboard pages.

Both gateways expose the same async interface so views never know whether
they talk to the remote admin API or to the in-memory fake.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections import defaultdict
from decimal import Decimal
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol

from django.apps import apps
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone
from django.utils.dateparse import parse_date

from salon_admin.client.exceptions import NotFoundError
from salon_admin.client.exceptions import ValidationError

from .entities import ENTITY_TYPES
from .entities import Booking
from .entities import BookingStatus
from .entities import Entity
from .entities import to_camel
from .entities import to_wire
from .fixtures import sample_data
from .repository import InMemoryRepository

if TYPE_CHECKING:  # import for type checking only
    from django.http import HttpRequest

    from salon_admin.client.services import ApiService

logger = logging.getLogger(__name__)

MEMORY_ANALYTICS_SECTIONS = ("overview", "services", "revenue")
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


class Gateway(Protocol):
    async def list(self, resource: str, filters: dict[str, Any] | None = None) -> list[Entity]: ...

    async def recent(self, resource: str, limit: int) -> list[Entity]: ...

    async def get(self, resource: str, pk: int | str) -> Entity: ...

    async def create(self, resource: str, data: dict[str, Any]) -> Entity: ...

    async def update(self, resource: str, pk: int | str, data: dict[str, Any]) -> Entity: ...

    async def delete(self, resource: str, pk: int | str) -> None: ...

    async def set_status(self, resource: str, pk: int | str, status: str) -> Entity: ...

    async def analytics(self, section: str, params: dict[str, Any] | None = None) -> Any: ...


def entity_type(resource: str) -> type[Entity]:
    try:
        return ENTITY_TYPES[resource]
    except KeyError as exc:
        msg = f"Unknown resource: {resource}"
        raise NotFoundError(msg) from exc


def _items(data: Any) -> list[dict[str, Any]]:
    """Collections come back bare or wrapped in a ``data``/``results`` envelope."""

    if isinstance(data, dict):
        for key in ("data", "results", "items"):
            if isinstance(data.get(key), list):
                return data[key]
        return []
    return list(data or [])


def _record(data: Any) -> dict[str, Any]:
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        return data["data"]
    return data if isinstance(data, dict) else {}


class RemoteGateway:
    """Entities in, wire payloads out, over the admin :class:`ApiService`."""

    def __init__(self, api: ApiService) -> None:
        self.api = api

    def _resource_api(self, resource: str):
        entity_type(resource)
        return getattr(self.api, resource)

    async def list(self, resource: str, filters: dict[str, Any] | None = None) -> list[Entity]:
        entity_class = entity_type(resource)
        params = {
            to_camel(key): value
            for key, value in (filters or {}).items()
            if value not in (None, "")
        }
        if resource == "bookings" and "date" in params:
            data = await self.api.bookings.by_date(params.pop("date"), params)
        else:
            data = await self._resource_api(resource).list(params)
        return [entity_class.from_payload(item) for item in _items(data)]

    async def recent(self, resource: str, limit: int) -> list[Entity]:
        entity_class = entity_type(resource)
        data = await self._resource_api(resource).list(
            {"limit": limit, "sort": "createdAt", "order": "desc"},
        )
        return [entity_class.from_payload(item) for item in _items(data)][:limit]

    async def get(self, resource: str, pk: int | str) -> Entity:
        data = await self._resource_api(resource).get(pk)
        return entity_type(resource).from_payload(_record(data))

    async def create(self, resource: str, data: dict[str, Any]) -> Entity:
        entity_class = entity_type(resource)
        created = await self._resource_api(resource).create(to_wire(data))
        return entity_class.from_payload(_record(created))

    async def update(self, resource: str, pk: int | str, data: dict[str, Any]) -> Entity:
        entity_class = entity_type(resource)
        updated = await self._resource_api(resource).update(pk, to_wire(data))
        return entity_class.from_payload(_record(updated))

    async def delete(self, resource: str, pk: int | str) -> None:
        await self._resource_api(resource).delete(pk)

    async def set_status(self, resource: str, pk: int | str, status: str) -> Entity:
        resource_api = self._resource_api(resource)
        if hasattr(resource_api, "update_status"):
            data = await resource_api.update_status(pk, status)
            return entity_type(resource).from_payload(_record(data))
        # Collections without a status endpoint take a full update.
        current = await self.get(resource, pk)
        current.status = status
        updated = await resource_api.update(pk, current.to_payload())
        return entity_type(resource).from_payload(_record(updated))

    async def analytics(self, section: str, params: dict[str, Any] | None = None) -> Any:
        try:
            return await self.api.analytics.section(section, params)
        except ValueError as exc:
            raise NotFoundError(str(exc)) from exc


class InMemoryGateway:
    def __init__(self, repositories: dict[str, InMemoryRepository]) -> None:
        self.repositories = repositories

    def _repository(self, resource: str) -> InMemoryRepository:
        entity_type(resource)
        return self.repositories[resource]

    def _check_references(self, data: dict[str, Any]) -> None:
        references = {
            "salon_id": "salons",
            "service_id": "services",
            "staff_id": "staff",
        }
        errors = {}
        for field, resource in references.items():
            value = data.get(field)
            if value is not None and not self.repositories[resource].exists(value):
                errors[field] = [f"Unknown {resource} id {value}."]
        if errors:
            msg = "Invalid references."
            raise ValidationError(msg, payload=errors)

    async def list(self, resource: str, filters: dict[str, Any] | None = None) -> list[Entity]:
        filters = dict(filters or {})
        predicate = None
        raw_date = filters.pop("date", None)
        if raw_date and resource == "bookings":
            day = parse_date(str(raw_date))
            if day is None:
                msg = "date must be YYYY-MM-DD."
                raise ValidationError(msg, payload={"date": [msg]})

            def predicate(booking: Booking) -> bool:
                return booking.booking_date is not None and booking.booking_date.date() == day

        return self._repository(resource).list(filters, predicate=predicate)

    async def recent(self, resource: str, limit: int) -> list[Entity]:
        items = self._repository(resource).list()
        items.sort(key=lambda e: (e.created_at, e.id), reverse=True)
        return items[:limit]

    async def get(self, resource: str, pk: int | str) -> Entity:
        return self._repository(resource).get(pk)

    async def create(self, resource: str, data: dict[str, Any]) -> Entity:
        self._check_references(data)
        entity = entity_type(resource).from_fields(data)
        entity.id = None
        return self._repository(resource).add(entity)

    async def update(self, resource: str, pk: int | str, data: dict[str, Any]) -> Entity:
        repository = self._repository(resource)
        repository.get(pk)
        self._check_references(data)
        return repository.update(pk, data)

    async def delete(self, resource: str, pk: int | str) -> None:
        self._repository(resource).remove(pk)

    async def set_status(self, resource: str, pk: int | str, status: str) -> Entity:
        return self._repository(resource).update(pk, {"status": status})

    async def analytics(self, section: str, params: dict[str, Any] | None = None) -> Any:
        if section not in MEMORY_ANALYTICS_SECTIONS:
            msg = f"Analytics section {section!r} is not available"
            raise NotFoundError(msg)
        return getattr(self, f"_{section}_analytics")(params or {})

    def _billable(self) -> list[tuple[Booking, Decimal]]:
        prices = {s.id: s.price for s in self.repositories["services"].list()}
        return [
            (booking, prices.get(booking.service_id, Decimal("0")))
            for booking in self.repositories["bookings"].list()
            if booking.status != BookingStatus.CANCELLED
        ]

    def _overview_analytics(self, params: dict[str, Any]) -> dict[str, Any]:
        bookings = self.repositories["bookings"].list()
        statuses = Counter(str(b.status) for b in bookings)
        now = timezone.now()
        monthly = sum(
            (
                price
                for booking, price in self._billable()
                if booking.booking_date is not None
                and (booking.booking_date.year, booking.booking_date.month) == (now.year, now.month)
            ),
            Decimal("0"),
        )
        return {
            "totalSalons": len(self.repositories["salons"]),
            "activeBookings": sum(statuses[s] for s in ACTIVE_BOOKING_STATUSES),
            "totalStaff": len(self.repositories["staff"]),
            "monthlyRevenue": float(monthly),
            "totalUsers": len({b.customer_email.lower() for b in bookings if b.customer_email}),
            "pendingBookings": statuses[BookingStatus.PENDING.value],
            "completedBookings": statuses[BookingStatus.COMPLETED.value],
            "cancelledBookings": statuses[BookingStatus.CANCELLED.value],
        }

    def _services_analytics(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        counts: Counter = Counter()
        for booking, _price in self._billable():
            counts[booking.service_id] += 1
        rows = [
            {
                "id": service.id,
                "name": service.name,
                "price": float(service.price),
                "bookingCount": counts[service.id],
                "revenue": float(service.price * counts[service.id]),
            }
            for service in self.repositories["services"].list()
        ]
        rows.sort(key=lambda row: (row["revenue"], row["bookingCount"]), reverse=True)
        limit = params.get("limit")
        return rows[:limit] if limit and limit > 0 else rows

    def _revenue_analytics(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        months: dict[str, dict[str, Any]] = defaultdict(
            lambda: {"revenue": Decimal("0"), "bookings": 0},
        )
        for booking, price in self._billable():
            if booking.booking_date is None:
                continue
            bucket = months[booking.booking_date.strftime("%Y-%m")]
            bucket["revenue"] += price
            bucket["bookings"] += 1
        return [
            {"month": month, "revenue": float(row["revenue"]), "bookings": row["bookings"]}
            for month, row in sorted(months.items())
        ]


def build_repositories(*, seed: bool = False) -> dict[str, InMemoryRepository]:
    data = sample_data() if seed else {}
    return {
        resource: InMemoryRepository(entity_class, data.get(resource, ()))
        for resource, entity_class in ENTITY_TYPES.items()
    }


def get_gateway(request: HttpRequest) -> Gateway:
    backend = getattr(settings, "SALON_BACKEND", "remote")
    if backend == "memory":
        return InMemoryGateway(apps.get_app_config("store").repositories)
    if backend == "remote":
        return RemoteGateway(request.admin_session.api)
    msg = f"Unknown SALON_BACKEND: {backend!r}"
    raise ImproperlyConfigured(msg)
