from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING
from typing import Any
from typing import Generic
from typing import Protocol
from typing import TypeVar

from django.utils import timezone

from salon_admin.client.exceptions import NotFoundError

from .entities import META_FIELDS
from .entities import Entity

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Callable
    from collections.abc import Iterable
    from collections.abc import Mapping

E = TypeVar("E", bound=Entity)

SEARCH_FILTER = "search"


class Repository(Protocol[E]):
    def list(self, filters: Mapping[str, Any] | None = None) -> list[E]: ...

    def get(self, pk: int | str) -> E: ...

    def add(self, entity: E) -> E: ...

    def update(self, pk: int | str, changes: Mapping[str, Any]) -> E: ...

    def remove(self, pk: int | str) -> None: ...


def _same(value: Any, expected: Any) -> bool:
    if value is None or expected is None:
        return value is expected
    return str(value) == str(expected)


class InMemoryRepository(Generic[E]):
    """Dict-backed fake of the remote store for one entity type.

    Ids are integers assigned on insert. Every read returns a copy, so callers
    never mutate stored records in place.
    """

    def __init__(self, entity_class: type[E], items: Iterable[E] = ()) -> None:
        self.entity_class = entity_class
        self._items: dict[int, E] = {}
        self._next_id = 1
        for item in items:
            self.add(item)

    def __len__(self) -> int:
        return len(self._items)

    def _key(self, pk: int | str) -> int:
        try:
            return int(pk)
        except (TypeError, ValueError) as exc:
            msg = f"{self.entity_class.__name__} {pk} not found"
            raise NotFoundError(msg) from exc

    def list(
        self,
        filters: Mapping[str, Any] | None = None,
        *,
        predicate: Callable[[E], bool] | None = None,
    ) -> list[E]:
        filters = dict(filters or {})
        term = filters.pop(SEARCH_FILTER, None)
        known = set(self.entity_class.field_names())
        equality = {k: v for k, v in filters.items() if k in known and v not in (None, "")}

        results = []
        for entity in self._items.values():
            if any(not _same(getattr(entity, k), v) for k, v in equality.items()):
                continue
            if term and not entity.matches(term):
                continue
            if predicate is not None and not predicate(entity):
                continue
            results.append(dataclasses.replace(entity))
        return results

    def get(self, pk: int | str) -> E:
        entity = self._items.get(self._key(pk))
        if entity is None:
            msg = f"{self.entity_class.__name__} {pk} not found"
            raise NotFoundError(msg)
        return dataclasses.replace(entity)

    def exists(self, pk: int | str | None) -> bool:
        if pk is None:
            return False
        try:
            return self._key(pk) in self._items
        except NotFoundError:
            return False

    def add(self, entity: E) -> E:
        if isinstance(entity.id, int) and entity.id not in self._items:
            pk = entity.id
        else:
            pk = self._next_id
        self._next_id = max(self._next_id, pk + 1)

        now = timezone.now()
        stored = dataclasses.replace(
            entity,
            id=pk,
            created_at=entity.created_at or now,
            updated_at=entity.updated_at or now,
        )
        self._items[pk] = stored
        return dataclasses.replace(stored)

    def update(self, pk: int | str, changes: Mapping[str, Any]) -> E:
        current = self.get(pk)
        known = set(self.entity_class.field_names()) - set(META_FIELDS)
        values = {k: v for k, v in changes.items() if k in known}
        stored = dataclasses.replace(current, **values, updated_at=timezone.now())
        self._items[self._key(pk)] = stored
        return dataclasses.replace(stored)

    def remove(self, pk: int | str) -> None:
        key = self._key(pk)
        if self._items.pop(key, None) is None:
            msg = f"{self.entity_class.__name__} {pk} not found"
            raise NotFoundError(msg)
