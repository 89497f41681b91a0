import pytest
from asgiref.sync import async_to_sync
from django.conf import settings

from salon_admin.client.exceptions import NotFoundError
from salon_admin.client.exceptions import ValidationError
from salon_admin.client.http import ApiClient
from salon_admin.client.services import ApiService
from salon_admin.client.tokens import MemoryMedium
from salon_admin.client.tokens import TokenStore
from salon_admin.store.entities import Booking
from salon_admin.store.entities import Salon
from salon_admin.store.gateways import InMemoryGateway
from salon_admin.store.gateways import RemoteGateway
from salon_admin.store.gateways import build_repositories
from tests.fakes import FakeTransport
from tests.fakes import body_of
from tests.fakes import query_of
from tests.fakes import session_with


@pytest.fixture
def memory():
    return InMemoryGateway(build_repositories(seed=True))


@pytest.fixture
def remote_transport():
    return FakeTransport()


@pytest.fixture
def remote(remote_transport):
    tokens = TokenStore(MemoryMedium({"admin_token": "access"}), MemoryMedium())
    client = ApiClient(settings.SALON_API_BASE_URL, tokens, session=session_with(remote_transport))
    yield RemoteGateway(ApiService(client))
    client.close()


def run(coro_fn, *args):
    return async_to_sync(coro_fn)(*args)


class TestInMemoryGateway:
    def test_list_filters(self, memory):
        pending = run(memory.list, "bookings", {"status": "pending"})
        assert [b.customer_name for b in pending] == ["Bob Smith"]

        by_salon = run(memory.list, "services", {"salon_id": "1"})
        assert len(by_salon) == 3  # noqa: PLR2004

    def test_bookings_by_date(self, memory):
        assert len(run(memory.list, "bookings", {"date": "2024-01-15"})) == 2  # noqa: PLR2004
        assert run(memory.list, "bookings", {"date": "2024-01-16"}) == []

    def test_bad_date_is_a_validation_error(self, memory):
        with pytest.raises(ValidationError):
            run(memory.list, "bookings", {"date": "15/01/2024"})

    def test_create_checks_references(self, memory):
        with pytest.raises(ValidationError) as excinfo:
            run(memory.create, "services", {"salon_id": 99, "name": "Facial"})
        assert "salon_id" in excinfo.value.payload

    def test_create_update_delete(self, memory):
        created = run(memory.create, "salons", {"name": "Harbour Cuts", "email": "h@salon.com"})
        assert isinstance(created, Salon)
        assert created.id == 2  # noqa: PLR2004

        updated = run(memory.update, "salons", created.id, {"name": "Harbour Cuts & Co"})
        assert updated.name == "Harbour Cuts & Co"

        run(memory.delete, "salons", created.id)
        with pytest.raises(NotFoundError):
            run(memory.get, "salons", created.id)

    def test_set_status(self, memory):
        booking = run(memory.set_status, "bookings", 2, "completed")
        assert booking.status == "completed"

    def test_unknown_resource(self, memory):
        with pytest.raises(NotFoundError):
            run(memory.list, "payments")

    def test_overview_analytics(self, memory):
        stats = run(memory.analytics, "overview")

        assert stats["totalSalons"] == 1
        assert stats["totalStaff"] == 2  # noqa: PLR2004
        assert stats["activeBookings"] == 2  # noqa: PLR2004
        assert stats["pendingBookings"] == 1
        assert stats["completedBookings"] == 0
        assert stats["totalUsers"] == 2  # noqa: PLR2004

    def test_services_analytics(self, memory):
        rows = run(memory.analytics, "services", {"limit": 2})

        assert len(rows) == 2  # noqa: PLR2004
        assert rows[0]["name"] == "Haircut"
        assert rows[0]["bookingCount"] == 1
        assert rows[0]["revenue"] == 30.0  # noqa: PLR2004

    def test_services_analytics_ignores_non_positive_limit(self, memory):
        rows = run(memory.analytics, "services", {"limit": -1})

        assert len(rows) == 3  # noqa: PLR2004

    def test_revenue_analytics(self, memory):
        assert run(memory.analytics, "revenue") == [
            {"month": "2024-01", "revenue": 55.0, "bookings": 2},
        ]

    def test_unsupported_analytics_section(self, memory):
        with pytest.raises(NotFoundError):
            run(memory.analytics, "users")

    def test_recent_returns_newest_first(self, memory):
        created = run(
            memory.create,
            "bookings",
            {"salon_id": 1, "service_id": 2, "customer_name": "Cleo"},
        )

        recent = run(memory.recent, "bookings", 2)

        assert [b.id for b in recent] == [created.id, 2]


class TestRemoteGateway:
    def test_list_unwraps_envelope_and_converts(self, remote, remote_transport):
        remote_transport.add(
            "GET",
            "/admin/bookings",
            (200, {"data": [{"id": "b-1", "customerName": "Alice", "salonId": "s-1"}]}),
        )

        (booking,) = run(remote.list, "bookings", {"salon_id": "s-1", "search": ""})

        assert isinstance(booking, Booking)
        assert booking.customer_name == "Alice"
        (call,) = remote_transport.calls
        assert query_of(call) == {"salonId": "s-1"}

    def test_list_by_date_uses_by_date_endpoint(self, remote, remote_transport):
        remote_transport.add("GET", "/admin/bookings/by-date", (200, []))

        run(remote.list, "bookings", {"date": "2024-01-15", "status": "pending"})

        (call,) = remote_transport.calls
        assert query_of(call) == {"date": "2024-01-15", "status": "pending"}

    def test_create_sends_camel_case(self, remote, remote_transport):
        remote_transport.add("POST", "/admin/staff", (201, {"id": 5, "name": "Jane"}))

        staff = run(remote.create, "staff", {"salon_id": 1, "name": "Jane"})

        assert staff.id == 5  # noqa: PLR2004
        assert body_of(remote_transport.calls[0]) == {"salonId": 1, "name": "Jane"}

    def test_salon_status_uses_status_endpoint(self, remote, remote_transport):
        remote_transport.add("PUT", "/admin/salons/1/status", (200, {"id": 1, "status": "inactive"}))

        salon = run(remote.set_status, "salons", 1, "inactive")

        assert salon.status == "inactive"

    def test_offer_status_falls_back_to_full_update(self, remote, remote_transport):
        remote_transport.add("GET", "/admin/offers/3", (200, {"id": 3, "title": "Spring"}))
        remote_transport.add(
            "PUT",
            "/admin/offers/3",
            (200, {"id": 3, "title": "Spring", "status": "inactive"}),
        )

        offer = run(remote.set_status, "offers", 3, "inactive")

        assert offer.status == "inactive"
        put = remote_transport.calls_to("PUT", "/admin/offers/3")[0]
        assert body_of(put)["status"] == "inactive"
        assert body_of(put)["title"] == "Spring"

    def test_unknown_analytics_section_is_not_found(self, remote):
        with pytest.raises(NotFoundError):
            run(remote.analytics, "weather")
