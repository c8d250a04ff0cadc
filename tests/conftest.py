"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from loguru import logger
from rest_framework.test import APIClient

from ticketing.domain import Caller, EventDraft, Role
from ticketing.services.account_service import AccountService
from ticketing.services.booking_engine import BookingEngine
from ticketing.services.notifications import EmailNotifier, NotificationDispatcher
from ticketing.services.query_service import BookingQueryService
from ticketing.stores.memory_store import in_memory_stores

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def stores():
    return in_memory_stores()


@pytest.fixture
def notifier() -> EmailNotifier:
    return EmailNotifier()


@pytest.fixture
def dispatcher(notifier):
    dispatcher = NotificationDispatcher(notifier, workers=2)
    yield dispatcher
    dispatcher.shutdown(wait=True)


@pytest.fixture
def engine(stores, dispatcher, clock) -> BookingEngine:
    return BookingEngine(stores, dispatcher, clock=clock)


@pytest.fixture
def queries(stores) -> BookingQueryService:
    return BookingQueryService(stores, recent_limit=3, low_stock_threshold=50)


@pytest.fixture
def accounts(stores) -> AccountService:
    return AccountService(stores)


@pytest.fixture
def organizer(accounts) -> Caller:
    user = accounts.register("Sarah", "organizer@test.com", "hash", Role.ORGANIZER)
    return Caller(user_id=user.id, role=user.role)


@pytest.fixture
def other_organizer(accounts) -> Caller:
    user = accounts.register("Omar", "other-organizer@test.com", "hash", Role.ORGANIZER)
    return Caller(user_id=user.id, role=user.role)


@pytest.fixture
def customer(accounts) -> Caller:
    user = accounts.register("Alex", "customer@test.com", "hash")
    return Caller(user_id=user.id, role=user.role)


@pytest.fixture
def other_customer(accounts) -> Caller:
    user = accounts.register("Blake", "blake@test.com", "hash")
    return Caller(user_id=user.id, role=user.role)


@pytest.fixture
def make_event(engine, organizer, clock):
    def _make(
        total_tickets: int = 300,
        price: str = "50",
        title: str = "Music Fest",
        location: str = "New York, NY",
        starts_in: timedelta = timedelta(days=30),
        caller: Caller | None = None,
    ):
        draft = EventDraft(
            title=title,
            description="Annual music festival",
            start_time=clock.now() + starts_in,
            location=location,
            total_tickets=total_tickets,
            price=Decimal(price),
        )
        return engine.create_event(caller or organizer, draft)

    return _make


@pytest.fixture
def log_records():
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
