"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. They hold state only:
no business validation and no concurrency control beyond keeping each single
primitive consistent. Callers own the atomicity of multi-step mutations.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from ticketing.domain import Booking, Event, User


class StoreUnavailableError(Exception):
    """Infrastructure fault: the backing storage could not serve a request.

    Deliberately not a DomainError, so adapters can tell "your request is
    invalid" apart from "the system is unavailable".
    """


class Identified(Protocol):
    @property
    def id(self) -> Any: ...


T = TypeVar("T", bound=Identified)


class RecordStore(ABC, Generic[T]):
    """Keyed collection of one entity type."""

    @abstractmethod
    def get(self, entity_id: Any) -> T | None:
        """Return the entity with this ID, or None if not found."""
        ...

    @abstractmethod
    def find(self, predicate: Callable[[T], bool]) -> T | None:
        """Return the first entity matching predicate, or None."""
        ...

    @abstractmethod
    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        """Return all entities matching predicate."""
        ...

    @abstractmethod
    def insert(self, entity: T) -> T:
        """Store a new entity and return it."""
        ...

    @abstractmethod
    def update(self, entity_id: Any, **changes: Any) -> T | None:
        """Apply a partial update. Return the updated entity, or None if absent."""
        ...

    @abstractmethod
    def delete(self, entity_id: Any) -> bool:
        """Remove an entity. Return whether anything was removed."""
        ...

    def all(self) -> list[T]:
        return self.filter(lambda _: True)

    def __iter__(self) -> Iterator[T]:
        return iter(self.all())


@dataclass(frozen=True)
class Stores:
    """The three collections the engine works against."""

    users: RecordStore[User]
    events: RecordStore[Event]
    bookings: RecordStore[Booking]
    atomic: Callable[[], AbstractContextManager[Any]]
