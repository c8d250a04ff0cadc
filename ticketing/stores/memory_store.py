"""In-memory implementation of the RecordStore."""

import threading
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from ticketing.stores.interfaces import RecordStore, StoreUnavailableError, Stores, T


class InMemoryRecordStore(RecordStore[T]):
    """Dict-backed store keyed by entity ID.

    The internal lock only keeps the dict consistent while a single primitive
    runs; sequences of calls are not atomic.
    """

    def __init__(self, entities: list[T] | None = None) -> None:
        self._rows: dict[Any, T] = {}
        self._lock = threading.Lock()
        for entity in entities or ():
            self.insert(entity)

    def get(self, entity_id: Any) -> T | None:
        with self._lock:
            return self._rows.get(entity_id)

    def find(self, predicate: Callable[[T], bool]) -> T | None:
        for entity in self._snapshot():
            if predicate(entity):
                return entity
        return None

    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        return [entity for entity in self._snapshot() if predicate(entity)]

    def insert(self, entity: T) -> T:
        with self._lock:
            if entity.id in self._rows:
                raise StoreUnavailableError(f"Duplicate id {entity.id}")
            self._rows[entity.id] = entity
        return entity

    def update(self, entity_id: Any, **changes: Any) -> T | None:
        with self._lock:
            current = self._rows.get(entity_id)
            if current is None:
                return None
            updated = replace(current, **changes)
            self._rows[entity_id] = updated
            return updated

    def delete(self, entity_id: Any) -> bool:
        with self._lock:
            return self._rows.pop(entity_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def _snapshot(self) -> list[T]:
        with self._lock:
            return list(self._rows.values())


def in_memory_stores() -> Stores:
    """Build an empty set of in-memory collections.

    ``atomic`` is a reentrant lock shared by writers grouping several
    primitives and readers that need those groups whole.
    """
    transaction = threading.RLock()
    return Stores(
        users=InMemoryRecordStore(),
        events=InMemoryRecordStore(),
        bookings=InMemoryRecordStore(),
        atomic=lambda: transaction,
    )
