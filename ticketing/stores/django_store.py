"""Django ORM implementation of the RecordStore.

Predicates are plain Python callables over domain models, so ``find`` and
``filter`` scan the table and convert each row before testing it.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from functools import wraps
from typing import Any

from django.db import DatabaseError, models, transaction

from ticketing import models as orm
from ticketing.domain import (
    Booking,
    BookingId,
    Event,
    EventId,
    EventStatus,
    Money,
    Role,
    User,
    UserId,
)
from ticketing.stores.interfaces import RecordStore, StoreUnavailableError, Stores, T


def _translate_errors(method):
    @wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except DatabaseError as exc:
            raise StoreUnavailableError(str(exc)) from exc

    return wrapper


class DjangoRecordStore(RecordStore[T]):
    """Database-backed store for one entity type using Django ORM."""

    def __init__(
        self,
        model: type[models.Model],
        to_domain: Callable[[Any], T],
        to_row: Callable[[T], dict[str, Any]],
    ) -> None:
        self._model = model
        self._to_domain = to_domain
        self._to_row = to_row

    @_translate_errors
    def get(self, entity_id: Any) -> T | None:
        row = self._model.objects.filter(pk=entity_id.value).first()
        return self._to_domain(row) if row is not None else None

    @_translate_errors
    def find(self, predicate: Callable[[T], bool]) -> T | None:
        for row in self._model.objects.iterator():
            entity = self._to_domain(row)
            if predicate(entity):
                return entity
        return None

    @_translate_errors
    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        entities = (self._to_domain(row) for row in self._model.objects.iterator())
        return [entity for entity in entities if predicate(entity)]

    @_translate_errors
    def insert(self, entity: T) -> T:
        self._model.objects.create(**self._to_row(entity))
        return entity

    @_translate_errors
    def update(self, entity_id: Any, **changes: Any) -> T | None:
        row = self._model.objects.filter(pk=entity_id.value).first()
        if row is None:
            return None
        updated = replace(self._to_domain(row), **changes)
        values = self._to_row(updated)
        values.pop("id")
        self._model.objects.filter(pk=entity_id.value).update(**values)
        return updated

    @_translate_errors
    def delete(self, entity_id: Any) -> bool:
        deleted, _ = self._model.objects.filter(pk=entity_id.value).delete()
        return deleted > 0


@contextmanager
def _atomic() -> Iterator[None]:
    try:
        with transaction.atomic():
            yield
    except DatabaseError as exc:
        raise StoreUnavailableError(str(exc)) from exc


def _user_to_domain(row: orm.User) -> User:
    return User(
        id=UserId(row.id),
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        role=Role(row.role),
    )


def _user_to_row(user: User) -> dict[str, Any]:
    return {
        "id": user.id.value,
        "name": user.name,
        "email": user.email,
        "password_hash": user.password_hash,
        "role": user.role.value,
    }


def _event_to_domain(row: orm.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        description=row.description,
        start_time=row.start_time,
        location=row.location,
        total_tickets=row.total_tickets,
        available_tickets=row.available_tickets,
        organizer_id=UserId(row.organizer_id),
        price=Money(row.price),
        status=EventStatus(row.status),
        image_ref=row.image_ref,
    )


def _event_to_row(event: Event) -> dict[str, Any]:
    return {
        "id": event.id.value,
        "title": event.title,
        "description": event.description,
        "start_time": event.start_time,
        "location": event.location,
        "total_tickets": event.total_tickets,
        "available_tickets": event.available_tickets,
        "organizer_id": event.organizer_id.value,
        "price": event.price.amount,
        "status": event.status.value,
        "image_ref": event.image_ref,
    }


def _booking_to_domain(row: orm.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        user_id=UserId(row.user_id),
        event_id=EventId(row.event_id),
        ticket_count=row.ticket_count,
        created_at=row.created_at,
        idempotency_key=row.idempotency_key,
    )


def _booking_to_row(booking: Booking) -> dict[str, Any]:
    return {
        "id": booking.id.value,
        "user_id": booking.user_id.value,
        "event_id": booking.event_id.value,
        "ticket_count": booking.ticket_count,
        "created_at": booking.created_at,
        "idempotency_key": booking.idempotency_key,
    }


def django_stores() -> Stores:
    """Build the collections backed by the default database."""
    return Stores(
        users=DjangoRecordStore(orm.User, _user_to_domain, _user_to_row),
        events=DjangoRecordStore(orm.Event, _event_to_domain, _event_to_row),
        bookings=DjangoRecordStore(orm.Booking, _booking_to_domain, _booking_to_row),
        atomic=_atomic,
    )
