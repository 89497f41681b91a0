"""Paths of the remote admin API, relative to the configured base URL."""

from __future__ import annotations

AUTH_LOGIN = "/auth/admin/login"
AUTH_LOGOUT = "/auth/admin/logout"
AUTH_REFRESH = "/auth/admin/refresh"
AUTH_ME = "/auth/admin/me"

SALONS = "/admin/salons"
SERVICES = "/admin/services"
STAFF = "/admin/staff"
BOOKINGS = "/admin/bookings"
BOOKINGS_BY_DATE = "/admin/bookings/by-date"
USERS = "/admin/users"
PAYMENTS = "/admin/payments"
PAYMENTS_WEBHOOK_LOGS = "/admin/payments/webhook-logs"
NOTIFICATIONS = "/admin/notifications"
NOTIFICATIONS_SEND = "/admin/notifications/send"
OFFERS = "/admin/offers"

ANALYTICS = "/admin/analytics"
ANALYTICS_SECTIONS = (
    "overview",
    "bookings",
    "revenue",
    "salons",
    "services",
    "users",
    "export",
)


def detail(collection: str, pk: int | str) -> str:
    return f"{collection}/{pk}"


def salon_status(pk: int | str) -> str:
    return f"{SALONS}/{pk}/status"


def salon_services(pk: int | str) -> str:
    return f"{SALONS}/{pk}/services"


def salon_staff(pk: int | str) -> str:
    return f"{SALONS}/{pk}/staff"


def salon_availability(pk: int | str) -> str:
    return f"{SALONS}/{pk}/availability"


def booking_status(pk: int | str) -> str:
    return f"{BOOKINGS}/{pk}/status"


def bookings_by_salon(pk: int | str) -> str:
    return f"{BOOKINGS}/salon/{pk}"


def user_favorites(pk: int | str) -> str:
    return f"{USERS}/{pk}/favorites"


def payment_refund(pk: int | str) -> str:
    return f"{PAYMENTS}/{pk}/refund"


def analytics(section: str) -> str:
    return f"{ANALYTICS}/{section}"
