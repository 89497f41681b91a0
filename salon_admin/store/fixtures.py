"""Sample records loaded into the in-memory store when ``SALON_MEMORY_SEED`` is on."""

from __future__ import annotations

from datetime import date
from datetime import datetime
from datetime import timezone
from decimal import Decimal

from .entities import Booking
from .entities import BookingStatus
from .entities import Offer
from .entities import Salon
from .entities import Service
from .entities import StaffMember


def sample_data() -> dict[str, list]:
    return {
        "salons": [
            Salon(
                id=1,
                name="Main Salon",
                address="123 Main St, City",
                phone="+1234567890",
                email="main@salon.com",
            ),
        ],
        "services": [
            Service(
                id=1,
                salon_id=1,
                name="Haircut",
                description="Professional haircut service",
                price=Decimal("30.00"),
                duration=30,
            ),
            Service(
                id=2,
                salon_id=1,
                name="Hair Coloring",
                description="Full hair coloring service",
                price=Decimal("80.00"),
                duration=120,
            ),
            Service(
                id=3,
                salon_id=1,
                name="Manicure",
                description="Professional manicure service",
                price=Decimal("25.00"),
                duration=45,
            ),
        ],
        "staff": [
            StaffMember(
                id=1,
                salon_id=1,
                name="John Smith",
                email="john@salon.com",
                phone="+1234567891",
                role="Hair Stylist",
                specialization="Hair Cutting & Coloring",
            ),
            StaffMember(
                id=2,
                salon_id=1,
                name="Jane Doe",
                email="jane@salon.com",
                phone="+1234567892",
                role="Nail Technician",
                specialization="Manicure & Pedicure",
            ),
        ],
        "bookings": [
            Booking(
                id=1,
                salon_id=1,
                service_id=1,
                staff_id=1,
                customer_name="Alice Johnson",
                customer_email="alice@email.com",
                booking_date=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
                status=BookingStatus.CONFIRMED,
            ),
            Booking(
                id=2,
                salon_id=1,
                service_id=3,
                staff_id=2,
                customer_name="Bob Smith",
                customer_email="bob@email.com",
                booking_date=datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc),
                status=BookingStatus.PENDING,
            ),
        ],
        "offers": [
            Offer(
                id=1,
                salon_id=1,
                title="New Year Special",
                description="20% off on all services",
                discount_percentage=Decimal("20.00"),
                start_date=date(2024, 1, 1),
                end_date=date(2024, 1, 31),
            ),
            Offer(
                id=2,
                salon_id=1,
                title="Weekend Deal",
                description="15% off on hair services",
                discount_percentage=Decimal("15.00"),
                start_date=date(2024, 1, 13),
                end_date=date(2024, 1, 14),
            ),
        ],
    }
