"""Flat records owned by the backing store.

The dashboard only ever holds transient copies. The remote API speaks
camelCase; entities convert with :meth:`Entity.from_payload` and
:meth:`Entity.to_payload`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date
from datetime import datetime
from decimal import Decimal
from decimal import InvalidOperation
from typing import Any
from typing import ClassVar

from django.db import models
from django.utils.dateparse import parse_date
from django.utils.dateparse import parse_datetime
from django.utils.translation import gettext_lazy as _

META_FIELDS = ("id", "created_at", "updated_at")


class Status(models.TextChoices):
    ACTIVE = "active", _("Active")
    INACTIVE = "inactive", _("Inactive")


class BookingStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    CONFIRMED = "confirmed", _("Confirmed")
    CANCELLED = "cancelled", _("Cancelled")
    COMPLETED = "completed", _("Completed")


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _as_decimal(value: Any) -> Decimal | None:
    if value in (None, ""):
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def _as_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime) or value is None:
        return value
    return parse_datetime(str(value).replace(" ", "T", 1))


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date) or value is None:
        return value
    return parse_date(str(value)[:10])


def _to_wire(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def to_wire(data: dict[str, Any]) -> dict[str, Any]:
    """camelCase a dict of snake_case field values for the remote API."""

    return {to_camel(name): _to_wire(value) for name, value in data.items()}


@dataclass
class Entity:
    id: int | str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    resource: ClassVar[str] = ""
    # Text fields matched by the case-insensitive ``search`` filter.
    search_fields: ClassVar[tuple[str, ...]] = ()
    decimal_fields: ClassVar[tuple[str, ...]] = ()
    datetime_fields: ClassVar[tuple[str, ...]] = ("created_at", "updated_at")
    date_fields: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in dataclasses.fields(cls))

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Entity:
        values: dict[str, Any] = {}
        for name in cls.field_names():
            camel = to_camel(name)
            if camel in payload:
                raw = payload[camel]
            elif name in payload:
                raw = payload[name]
            else:
                continue
            values[name] = cls._coerce(name, raw)
        return cls(**values)

    @classmethod
    def from_fields(cls, data: dict[str, Any]) -> Entity:
        known = set(cls.field_names())
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def _coerce(cls, name: str, raw: Any) -> Any:
        if name in cls.decimal_fields:
            return _as_decimal(raw)
        if name in cls.datetime_fields:
            return _as_datetime(raw)
        if name in cls.date_fields:
            return _as_date(raw)
        return raw

    def to_payload(self, *, include_meta: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for name in self.field_names():
            if name in META_FIELDS and not include_meta:
                continue
            payload[to_camel(name)] = _to_wire(getattr(self, name))
        return payload

    def matches(self, term: str) -> bool:
        needle = term.strip().lower()
        if not needle:
            return True
        return any(
            needle in str(getattr(self, name) or "").lower() for name in self.search_fields
        )


@dataclass
class Salon(Entity):
    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    status: str = Status.ACTIVE
    waiting_time: str | None = None
    home_service_available: bool = False
    rating: Decimal | None = None
    total_bookings: int | None = None

    resource: ClassVar[str] = "salons"
    search_fields: ClassVar[tuple[str, ...]] = ("name", "address", "email", "phone")
    decimal_fields: ClassVar[tuple[str, ...]] = ("rating",)


@dataclass
class Service(Entity):
    salon_id: int | str | None = None
    name: str = ""
    description: str = ""
    price: Decimal = Decimal("0")
    duration: int = 30
    status: str = Status.ACTIVE

    resource: ClassVar[str] = "services"
    search_fields: ClassVar[tuple[str, ...]] = ("name", "description")
    decimal_fields: ClassVar[tuple[str, ...]] = ("price",)


@dataclass
class StaffMember(Entity):
    salon_id: int | str | None = None
    name: str = ""
    email: str = ""
    phone: str = ""
    role: str = ""
    specialization: str = ""
    status: str = Status.ACTIVE

    resource: ClassVar[str] = "staff"
    search_fields: ClassVar[tuple[str, ...]] = ("name", "email", "role", "specialization")


@dataclass
class Booking(Entity):
    salon_id: int | str | None = None
    service_id: int | str | None = None
    staff_id: int | str | None = None
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    booking_date: datetime | None = None
    status: str = BookingStatus.PENDING
    notes: str = ""

    resource: ClassVar[str] = "bookings"
    search_fields: ClassVar[tuple[str, ...]] = (
        "customer_name",
        "customer_email",
        "customer_phone",
        "notes",
    )
    datetime_fields: ClassVar[tuple[str, ...]] = ("created_at", "updated_at", "booking_date")


@dataclass
class Offer(Entity):
    salon_id: int | str | None = None
    title: str = ""
    description: str = ""
    discount_percentage: Decimal = Decimal("0")
    start_date: date | None = None
    end_date: date | None = None
    status: str = Status.ACTIVE

    resource: ClassVar[str] = "offers"
    search_fields: ClassVar[tuple[str, ...]] = ("title", "description")
    decimal_fields: ClassVar[tuple[str, ...]] = ("discount_percentage",)
    date_fields: ClassVar[tuple[str, ...]] = ("start_date", "end_date")


ENTITY_TYPES: dict[str, type[Entity]] = {
    entity.resource: entity for entity in (Salon, Service, StaffMember, Booking, Offer)
}
