"""Concurrency tests for the booking engine and lock registry.

These run real threads against the in-memory store.
Run with: pytest tests/test_concurrency.py -v
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from ticketing.domain import EventPatch
from ticketing.domain.errors import (
    CapacityBelowDemandError,
    DuplicateRequestError,
    InsufficientInventoryError,
)
from ticketing.services.locks import KeyedLocks

THREADS = 16


def run_concurrently(calls):
    """Start every call at the same moment and collect results or errors."""
    barrier = threading.Barrier(len(calls))

    def run(call):
        barrier.wait()
        try:
            return call()
        except Exception as exc:
            return exc

    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        return list(pool.map(run, calls))


class TestNoOversell:
    """Concurrent bookings never sell more than is available."""

    @pytest.mark.parametrize("tickets_per_call", [1, 3])
    def test_exact_successes(self, engine, make_event, customer, stores, tickets_per_call):
        """available // tickets_per_call succeed; the rest run out of inventory."""
        event = make_event(total_tickets=10)
        calls = [
            lambda i=i: engine.create_booking(customer, event.id, tickets_per_call, f"k{i}")
            for i in range(THREADS)
        ]

        results = run_concurrently(calls)

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 10 // tickets_per_call
        assert all(isinstance(f, InsufficientInventoryError) for f in failures)

        stored = stores.events.get(event.id)
        sold = sum(b.ticket_count for b in stores.bookings.filter(lambda b: b.event_id == event.id))
        assert sold == len(successes) * tickets_per_call
        assert stored.available_tickets == 10 - sold

    def test_same_key_books_once(self, engine, make_event, customer, stores):
        """Concurrent retries of one request yield one booking and one decrement."""
        event = make_event(total_tickets=100)
        calls = [lambda: engine.create_booking(customer, event.id, 2, "same") for _ in range(THREADS)]

        results = run_concurrently(calls)

        assert sum(not isinstance(r, Exception) for r in results) == 1
        assert sum(isinstance(r, DuplicateRequestError) for r in results) == THREADS - 1
        assert stores.events.get(event.id).available_tickets == 98
        assert len(stores.bookings.all()) == 1

    def test_same_key_across_events_books_once(self, engine, make_event, customer, stores):
        """Key uniqueness holds even when retries target different events."""
        events = [make_event(title=f"Event {i}") for i in range(4)]
        calls = [
            lambda e=e: engine.create_booking(customer, e.id, 1, "shared")
            for e in events
            for _ in range(4)
        ]

        results = run_concurrently(calls)

        assert sum(not isinstance(r, Exception) for r in results) == 1
        assert len(stores.bookings.all()) == 1

    def test_update_and_bookings_conserve_inventory(
        self, engine, make_event, organizer, customer, stores
    ):
        """Capacity changes racing bookings keep available + booked == total."""
        event = make_event(total_tickets=20)
        calls = [
            lambda i=i: engine.create_booking(customer, event.id, 1, f"k{i}")
            for i in range(THREADS)
        ]
        calls += [
            lambda: engine.update_event(organizer, event.id, EventPatch(total_tickets=12)),
            lambda: engine.update_event(organizer, event.id, EventPatch(total_tickets=30)),
        ]

        results = run_concurrently(calls)

        assert all(
            isinstance(r, (InsufficientInventoryError, CapacityBelowDemandError))
            for r in results
            if isinstance(r, Exception)
        )
        stored = stores.events.get(event.id)
        booked = sum(b.ticket_count for b in stores.bookings.filter(lambda b: b.event_id == event.id))
        assert stored.available_tickets + booked == stored.total_tickets
        assert booked <= stored.total_tickets


class TestKeyedLocks:
    def test_different_keys_do_not_block(self):
        """Holding one key leaves every other key free."""
        locks = KeyedLocks()
        acquired = threading.Event()

        def other():
            with locks.hold("event-b"):
                acquired.set()

        with locks.hold("event-a"):
            thread = threading.Thread(target=other)
            thread.start()
            assert acquired.wait(timeout=2)
            thread.join()

    def test_same_key_is_exclusive(self):
        """A second holder of the same key waits for the first."""
        locks = KeyedLocks()
        entered = threading.Event()

        def contender():
            with locks.hold("event-a"):
                entered.set()

        with locks.hold("event-a"):
            thread = threading.Thread(target=contender)
            thread.start()
            assert not entered.wait(timeout=0.2)
        thread.join(timeout=2)
        assert entered.is_set()

    def test_released_keys_are_forgotten(self):
        """The registry drops a key once nobody holds it."""
        locks = KeyedLocks()
        with locks.hold("event-a"):
            assert len(locks) == 1
        assert len(locks) == 0

    def test_released_after_exception(self):
        locks = KeyedLocks()
        with pytest.raises(RuntimeError):
            with locks.hold("event-a"):
                raise RuntimeError("boom")
        assert len(locks) == 0
