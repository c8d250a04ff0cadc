"""Read-side projections for customers and organizers.

Reads take no locks: a result may reflect the state just before or just after
a concurrent write.
"""

from decimal import Decimal

from ticketing.domain import (
    BookingWithBooker,
    BookingWithEvent,
    Caller,
    Event,
    EventId,
    Money,
    OrganizerSummary,
)
from ticketing.domain.errors import EventNotFoundError, UnauthorizedError
from ticketing.services.validation import coerce_event_id
from ticketing.stores.interfaces import Stores


class BookingQueryService:
    """Service for event and booking queries."""

    def __init__(
        self,
        stores: Stores,
        recent_limit: int = 10,
        low_stock_threshold: int = 50,
    ) -> None:
        self._stores = stores
        self._recent_limit = recent_limit
        self._low_stock_threshold = low_stock_threshold

    def list_events(self, search: str | None = None) -> list[Event]:
        """Return active events ordered by start time.

        ``search`` matches title or location, case-insensitively.
        """
        needle = (search or "").strip().lower()

        def matches(event: Event) -> bool:
            if not event.is_active:
                return False
            if not needle:
                return True
            return needle in event.title.lower() or needle in event.location.lower()

        return sorted(self._stores.events.filter(matches), key=lambda e: e.start_time)

    def get_event(self, event_id: EventId | str) -> Event:
        """Return an event by ID, whatever its status.

        Raises:
            InvalidInputError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event_id = coerce_event_id(event_id)
        event = self._stores.events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def list_organizer_events(self, caller: Caller) -> list[Event]:
        events = self._stores.events.filter(lambda e: e.organizer_id == caller.user_id)
        return sorted(events, key=lambda e: e.start_time)

    def get_my_bookings(self, caller: Caller) -> list[BookingWithEvent]:
        """Return the caller's bookings, newest first, each with its event."""
        bookings = self._stores.bookings.filter(lambda b: b.user_id == caller.user_id)
        bookings.sort(key=lambda b: b.created_at, reverse=True)
        return [
            BookingWithEvent(booking=b, event=self._stores.events.get(b.event_id))
            for b in bookings
        ]

    def get_event_bookings(
        self, caller: Caller, event_id: EventId | str
    ) -> list[BookingWithBooker]:
        """Return an event's bookings with the users who made them.

        Raises:
            InvalidInputError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            UnauthorizedError: If the caller does not organize the event.
        """
        event = self.get_event(event_id)
        if event.organizer_id != caller.user_id:
            raise UnauthorizedError()

        bookings = self._stores.bookings.filter(lambda b: b.event_id == event.id)
        bookings.sort(key=lambda b: b.created_at, reverse=True)
        return [
            BookingWithBooker(booking=b, user=self._stores.users.get(b.user_id))
            for b in bookings
        ]

    def organizer_summary(self, caller: Caller) -> OrganizerSummary:
        """Aggregate tickets sold and revenue across the caller's events.

        Computed from the stores on every call, never cached.
        """
        with self._stores.atomic():
            events = {
                e.id: e
                for e in self._stores.events.filter(
                    lambda e: e.organizer_id == caller.user_id
                )
            }
            bookings = self._stores.bookings.filter(lambda b: b.event_id in events)

        revenue = Money(Decimal("0"))
        for booking in bookings:
            revenue += events[booking.event_id].price.times(booking.ticket_count)

        recent = sorted(bookings, key=lambda b: b.created_at, reverse=True)
        return OrganizerSummary(
            event_count=len(events),
            tickets_sold=sum(b.ticket_count for b in bookings),
            revenue=revenue,
            booking_count=len(bookings),
            recent_bookings=tuple(
                BookingWithBooker(booking=b, user=self._stores.users.get(b.user_id))
                for b in recent[: self._recent_limit]
            ),
        )

    def stock_label(self, event: Event) -> str:
        if event.available_tickets == 0:
            return "Sold Out"
        if event.available_tickets <= self._low_stock_threshold:
            return "Low Stock"
        return "Available"
