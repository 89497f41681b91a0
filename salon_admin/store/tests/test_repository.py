import pytest

from salon_admin.client.exceptions import NotFoundError
from salon_admin.store.entities import Salon
from salon_admin.store.repository import InMemoryRepository


@pytest.fixture
def salons():
    return InMemoryRepository(
        Salon,
        [
            Salon(name="Main Salon", address="123 Main St", status="active"),
            Salon(name="Downtown Spa", address="9 Center Rd", status="inactive"),
        ],
    )


def test_add_assigns_ids_and_timestamps(salons):
    salon = salons.add(Salon(name="Harbour Cuts"))

    assert salon.id == 3  # noqa: PLR2004
    assert salon.created_at is not None
    assert salon.updated_at is not None


def test_add_keeps_explicit_integer_ids():
    repository = InMemoryRepository(Salon, [Salon(id=10, name="Ten")])

    assert repository.add(Salon(name="Next")).id == 11  # noqa: PLR2004


def test_reads_return_copies(salons):
    salon = salons.get(1)
    salon.name = "Changed"

    assert salons.get(1).name == "Main Salon"


def test_get_accepts_string_ids(salons):
    assert salons.get("2").name == "Downtown Spa"


def test_missing_or_malformed_ids_raise_not_found(salons):
    with pytest.raises(NotFoundError):
        salons.get(99)
    with pytest.raises(NotFoundError):
        salons.get("abc")
    with pytest.raises(NotFoundError):
        salons.remove(99)


def test_filters_by_equality_and_search(salons):
    assert [s.name for s in salons.list({"status": "active"})] == ["Main Salon"]
    assert [s.name for s in salons.list({"search": "center"})] == ["Downtown Spa"]
    assert [s.name for s in salons.list({"status": "active", "search": "center"})] == []
    # Blank values and unknown keys do not filter.
    assert len(salons.list({"status": "", "colour": "red"})) == 2  # noqa: PLR2004


def test_update_ignores_meta_and_unknown_fields(salons):
    original = salons.get(1)

    updated = salons.update(1, {"name": "Main Street Salon", "id": 50, "colour": "red"})

    assert updated.id == 1
    assert updated.name == "Main Street Salon"
    assert updated.created_at == original.created_at
    assert updated.updated_at >= original.updated_at


def test_remove(salons):
    salons.remove(1)

    assert len(salons) == 1
    assert not salons.exists(1)
