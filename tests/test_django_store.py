"""Integration tests for the Django ORM record store.

Run with: pytest tests/test_django_store.py -v
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from django.db import OperationalError

from ticketing.domain import (
    Booking,
    BookingId,
    Caller,
    Event,
    EventDraft,
    EventId,
    EventStatus,
    Money,
    Role,
    User,
    UserId,
)
from ticketing.domain.errors import InsufficientInventoryError
from ticketing.services.booking_engine import BookingEngine
from ticketing.stores.django_store import DjangoRecordStore, django_stores
from ticketing.stores.interfaces import StoreUnavailableError

START = datetime(2030, 5, 20, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def db_stores():
    return django_stores()


@pytest.fixture
def organizer_user(db_stores) -> User:
    return db_stores.users.insert(
        User(
            id=UserId(uuid4()),
            name="Sarah",
            email="organizer@test.com",
            password_hash="hash",
            role=Role.ORGANIZER,
        )
    )


@pytest.fixture
def event(db_stores, organizer_user) -> Event:
    return db_stores.events.insert(
        Event(
            id=EventId(uuid4()),
            title="Music Fest",
            description="Annual music festival",
            start_time=START,
            location="New York, NY",
            total_tickets=300,
            available_tickets=300,
            organizer_id=organizer_user.id,
            price=Money(Decimal("50.00")),
        )
    )


@pytest.mark.django_db
class TestDjangoRecordStore:
    """Round trips between domain models and ORM rows."""

    def test_event_round_trip(self, db_stores, event):
        assert db_stores.events.get(event.id) == event

    def test_find_and_filter_use_domain_predicates(self, db_stores, event, organizer_user):
        assert db_stores.events.find(lambda e: e.title == "Music Fest") == event
        assert db_stores.users.filter(lambda u: u.role is Role.ORGANIZER) == [organizer_user]
        assert db_stores.events.find(lambda e: e.title == "Missing") is None

    def test_partial_update(self, db_stores, event):
        updated = db_stores.events.update(
            event.id, available_tickets=290, status=EventStatus.CANCELLED
        )

        assert updated.available_tickets == 290
        assert updated.status is EventStatus.CANCELLED
        assert db_stores.events.get(event.id) == updated

    def test_update_missing_returns_none(self, db_stores):
        assert db_stores.events.update(EventId(uuid4()), title="x") is None

    def test_booking_round_trip(self, db_stores, event, organizer_user):
        booking = Booking(
            id=BookingId(uuid4()),
            user_id=organizer_user.id,
            event_id=event.id,
            ticket_count=2,
            created_at=START - timedelta(days=1),
            idempotency_key="book_1",
        )
        db_stores.bookings.insert(booking)

        assert db_stores.bookings.find(lambda b: b.idempotency_key == "book_1") == booking

    def test_delete(self, db_stores, event):
        assert db_stores.events.delete(event.id) is True
        assert db_stores.events.get(event.id) is None
        assert db_stores.events.delete(event.id) is False


@pytest.mark.django_db
class TestEngineOnDatabase:
    """The engine behaves the same against the ORM store."""

    def test_booking_commits_inventory_and_record(self, db_stores, organizer_user, dispatcher):
        engine = BookingEngine(db_stores, dispatcher)
        caller = Caller(organizer_user.id, organizer_user.role)
        event = engine.create_event(
            caller,
            EventDraft(
                title="Tech Conference",
                description="",
                start_time=START,
                location="San Francisco, CA",
                total_tickets=5,
                price=Decimal("150"),
            ),
        )

        booking = engine.create_booking(caller, event.id, 3, "k1")
        with pytest.raises(InsufficientInventoryError):
            engine.create_booking(caller, event.id, 3, "k2")

        assert db_stores.events.get(event.id).available_tickets == 2
        assert db_stores.bookings.all() == [booking]


class BrokenManager:
    def filter(self, **kwargs):
        raise OperationalError("database is locked")

    def iterator(self):
        raise OperationalError("database is locked")


class BrokenModel:
    objects = BrokenManager()


class TestStoreFailures:
    """Database errors surface as StoreUnavailableError."""

    @pytest.fixture
    def broken_store(self):
        return DjangoRecordStore(BrokenModel, lambda row: row, lambda entity: {})

    def test_get_translates_database_error(self, broken_store):
        with pytest.raises(StoreUnavailableError):
            broken_store.get(EventId(uuid4()))

    def test_filter_translates_database_error(self, broken_store):
        with pytest.raises(StoreUnavailableError):
            broken_store.filter(lambda _: True)

    def test_store_error_is_not_a_domain_error(self):
        from ticketing.domain.errors import DomainError

        assert not issubclass(StoreUnavailableError, DomainError)
