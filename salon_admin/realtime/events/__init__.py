"""Push events the admin API emits over the realtime connection.

Server payloads look like ``{"type": ..., "data": {...}, "timestamp": ...}``;
subscribers receive them wrapped in :class:`RealtimeEvent`.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any

BOOKING_CREATED = "booking.created"
BOOKING_UPDATED = "booking.updated"
BOOKING_CANCELLED = "booking.cancelled"
BOOKING_COMPLETED = "booking.completed"

SALON_UPDATED = "salon.updated"
SALON_STATUS_CHANGED = "salon.status_changed"

PAYMENT_COMPLETED = "payment.completed"
PAYMENT_FAILED = "payment.failed"
PAYMENT_REFUNDED = "payment.refunded"

USER_REGISTERED = "user.registered"
USER_UPDATED = "user.updated"

SYSTEM_MAINTENANCE = "system.maintenance"
SYSTEM_ANNOUNCEMENT = "system.announcement"

BOOKING_EVENTS = (BOOKING_CREATED, BOOKING_UPDATED, BOOKING_CANCELLED, BOOKING_COMPLETED)
SALON_EVENTS = (SALON_UPDATED, SALON_STATUS_CHANGED)
PAYMENT_EVENTS = (PAYMENT_COMPLETED, PAYMENT_FAILED, PAYMENT_REFUNDED)
USER_EVENTS = (USER_REGISTERED, USER_UPDATED)
SYSTEM_EVENTS = (SYSTEM_MAINTENANCE, SYSTEM_ANNOUNCEMENT)

PUSH_EVENTS = BOOKING_EVENTS + SALON_EVENTS + PAYMENT_EVENTS + USER_EVENTS + SYSTEM_EVENTS

# Room control messages sent by the client.
JOIN_SALON = "join_salon"
LEAVE_SALON = "leave_salon"
JOIN_ADMIN = "join_admin"
LEAVE_ADMIN = "leave_admin"


@dataclass(frozen=True)
class RealtimeEvent:
    type: str
    data: Any = field(default_factory=dict)
    timestamp: str | None = None

    @property
    def action(self) -> str:
        """``created`` for ``booking.created`` and so on."""

        return self.type.rpartition(".")[2]

    @classmethod
    def from_payload(cls, event_name: str, payload: Any) -> RealtimeEvent:
        if isinstance(payload, dict) and "data" in payload:
            return cls(
                type=payload.get("type") or event_name,
                data=payload.get("data"),
                timestamp=payload.get("timestamp"),
            )
        return cls(type=event_name, data=payload)
