from datetime import date
from decimal import Decimal

from salon_admin.store.entities import Booking
from salon_admin.store.entities import Offer
from salon_admin.store.entities import Salon
from salon_admin.store.entities import Service
from salon_admin.store.entities import to_camel
from salon_admin.store.entities import to_wire


def test_to_camel():
    assert to_camel("salon_id") == "salonId"
    assert to_camel("home_service_available") == "homeServiceAvailable"
    assert to_camel("name") == "name"


def test_from_payload_converts_wire_types_and_ignores_unknown_keys():
    booking = Booking.from_payload(
        {
            "id": "b-1",
            "salonId": "s-1",
            "customerName": "Alice Johnson",
            "bookingDate": "2024-01-15T10:00:00Z",
            "status": "confirmed",
            "salon": {"name": "Main Salon"},
        },
    )

    assert booking.id == "b-1"
    assert booking.salon_id == "s-1"
    assert booking.booking_date.year == 2024  # noqa: PLR2004
    assert booking.booking_date.hour == 10  # noqa: PLR2004
    assert booking.notes == ""


def test_from_payload_accepts_sql_style_timestamps():
    booking = Booking.from_payload({"booking_date": "2024-01-15 14:00:00"})
    assert booking.booking_date.hour == 14  # noqa: PLR2004


def test_decimals_and_dates():
    offer = Offer.from_payload(
        {"discountPercentage": 15, "startDate": "2024-01-13", "endDate": "2024-01-14"},
    )
    service = Service.from_payload({"price": "30.00", "duration": 30})

    assert offer.discount_percentage == Decimal("15")
    assert offer.start_date == date(2024, 1, 13)
    assert service.price == Decimal("30.00")


def test_to_payload_is_camel_case_without_meta_fields():
    salon = Salon(
        id=1,
        name="Main Salon",
        home_service_available=True,
        rating=Decimal("4.50"),
    )

    payload = salon.to_payload()

    assert "id" not in payload
    assert "createdAt" not in payload
    assert payload["homeServiceAvailable"] is True
    assert payload["rating"] == 4.5  # noqa: PLR2004
    assert salon.to_payload(include_meta=True)["id"] == 1


def test_to_wire_serializes_values():
    assert to_wire({"start_date": date(2024, 1, 1), "price": Decimal("9.99")}) == {
        "startDate": "2024-01-01",
        "price": 9.99,
    }


def test_search_matches_text_fields_case_insensitively():
    salon = Salon(name="Main Salon", address="123 Main St", email="main@salon.com")

    assert salon.matches("main st")
    assert salon.matches("SALON.COM")
    assert not salon.matches("downtown")
