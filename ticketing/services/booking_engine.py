"""Booking engine - all write-side business logic lives here.

The engine:
- Depends only on interfaces (stores, dispatcher, clock)
- Validates domain invariants
- Serializes read-check-write sequences per event
- Returns domain models or raises domain errors

Stores give no atomicity of their own, so every sequence that reads an
event's inventory and then writes it runs while holding that event's lock.
Booking additionally holds the idempotency key's lock, always taken first.
Notifications are enqueued only after all locks are released.
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from ticketing.domain import (
    Booking,
    BookingId,
    Caller,
    Event,
    EventDraft,
    EventId,
    EventPatch,
    EventStatus,
    NotificationJob,
    User,
)
from ticketing.domain.errors import (
    CapacityBelowDemandError,
    DomainError,
    DuplicateRequestError,
    EventExpiredError,
    EventNotFoundError,
    EventUnavailableError,
    InsufficientInventoryError,
    InvalidInputError,
    UnauthorizedError,
    UserNotFoundError,
)
from ticketing.services.clock import Clock, IdGenerator, SystemClock, UuidGenerator
from ticketing.services.locks import KeyedLocks
from ticketing.services.notifications import (
    NotificationDispatcher,
    new_booking_confirmation,
    new_event_update,
)
from ticketing.services.validation import (
    coerce_event_id,
    require_price,
    require_start_time,
    require_text,
    require_ticket_count,
)
from ticketing.stores.interfaces import Stores


@dataclass(frozen=True)
class _Reservation:
    booking: Booking
    event: Event
    user: User


class BookingEngine:
    """Service for event and booking writes."""

    def __init__(
        self,
        stores: Stores,
        dispatcher: NotificationDispatcher,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
    ) -> None:
        self._stores = stores
        self._dispatcher = dispatcher
        self._clock = clock or SystemClock()
        self._ids = ids or UuidGenerator()
        self._locks = KeyedLocks()

    def create_event(self, caller: Caller, draft: EventDraft) -> Event:
        """Create an active event with every ticket available.

        Raises:
            UnauthorizedError: If the caller is not an organizer.
            InvalidInputError: If the draft has no title or location, fewer
                than one ticket, a negative price or a naive start time.
            UserNotFoundError: If the caller has no user record.
        """
        if not caller.is_organizer:
            raise UnauthorizedError("Only organizers can create events")

        total = require_ticket_count(draft.total_tickets, "Total tickets")
        event = Event(
            id=EventId(self._ids.new_id()),
            title=require_text(draft.title, "Title"),
            description=draft.description or "",
            start_time=require_start_time(draft.start_time),
            location=require_text(draft.location, "Location"),
            total_tickets=total,
            available_tickets=total,
            organizer_id=caller.user_id,
            price=require_price(draft.price),
            image_ref=draft.image_ref,
        )
        if self._stores.users.get(caller.user_id) is None:
            raise UserNotFoundError(caller.user_id)

        self._stores.events.insert(event)
        logger.bind(event_id=str(event.id)).info("Event created: {}", event.title)
        return event

    def update_event(
        self, caller: Caller, event_id: EventId | str, patch: EventPatch
    ) -> Event:
        """Apply an organizer's partial update.

        When ``total_tickets`` changes, availability is recomputed from the
        tickets already booked. Booked customers are notified afterwards.

        Raises:
            InvalidInputError: If the patch is empty or holds invalid values.
            EventNotFoundError: If the event does not exist.
            UnauthorizedError: If the caller does not organize the event.
            CapacityBelowDemandError: If total tickets would drop below the
                tickets already booked.
        """
        event_id = coerce_event_id(event_id)
        changes = self._validated_changes(patch)

        with self._locks.hold(("event", event_id)):
            self._owned_event(caller, event_id)
            bookings = self._stores.bookings.filter(lambda b: b.event_id == event_id)
            booked = sum(booking.ticket_count for booking in bookings)

            if "total_tickets" in changes:
                if changes["total_tickets"] < booked:
                    raise CapacityBelowDemandError(booked)
                changes["available_tickets"] = changes["total_tickets"] - booked

            updated = self._stores.events.update(event_id, **changes)
            if updated is None:
                raise EventNotFoundError(event_id)

        logger.bind(event_id=str(event_id)).info(
            "Event updated: {}", ", ".join(patch.changed_fields())
        )
        affected = len({booking.user_id for booking in bookings})
        self._notify(new_event_update(updated.title, affected, patch.changed_fields()))
        return updated

    def delete_event(self, caller: Caller, event_id: EventId | str) -> bool:
        """Delete an event, keeping it as cancelled if anyone booked it.

        Raises:
            EventNotFoundError: If the event does not exist.
            UnauthorizedError: If the caller does not organize the event.
        """
        event_id = coerce_event_id(event_id)
        log = logger.bind(event_id=str(event_id))

        with self._locks.hold(("event", event_id)):
            event = self._owned_event(caller, event_id)
            has_bookings = (
                self._stores.bookings.find(lambda b: b.event_id == event_id) is not None
            )
            if has_bookings:
                if event.status is not EventStatus.CANCELLED:
                    self._stores.events.update(event_id, status=EventStatus.CANCELLED)
                log.warning("Event soft deleted (has bookings)")
            else:
                self._stores.events.delete(event_id)
                log.info("Event deleted")
        return True

    def create_booking(
        self,
        caller: Caller,
        event_id: EventId | str,
        ticket_count: int,
        idempotency_key: str,
    ) -> Booking:
        """Book tickets for the caller, at most once per idempotency key.

        Raises:
            InvalidInputError: If ticket_count is not positive or the key is blank.
            DuplicateRequestError: If a booking with this key already exists.
            EventNotFoundError: If the event does not exist.
            EventUnavailableError: If the event has been cancelled.
            EventExpiredError: If the event has already started.
            InsufficientInventoryError: If fewer tickets remain than requested.
            UserNotFoundError: If the caller has no user record.
        """
        event_id = coerce_event_id(event_id)
        ticket_count = require_ticket_count(ticket_count)
        if not isinstance(idempotency_key, str) or not idempotency_key.strip():
            raise InvalidInputError("Idempotency key is required")

        log = logger.bind(event_id=str(event_id), idempotency_key=idempotency_key)
        try:
            with (
                self._locks.hold(("idempotency", idempotency_key)),
                self._locks.hold(("event", event_id)),
            ):
                reservation = self._reserve(caller, event_id, ticket_count, idempotency_key)
        except DomainError as exc:
            log.debug("Booking rejected: {}", exc)
            raise

        booking, event, user = reservation.booking, reservation.event, reservation.user
        log.info("Booking success: {} ticket(s), booking {}", ticket_count, booking.id)
        self._notify(
            new_booking_confirmation(
                user_name=user.name,
                user_email=user.email,
                event_title=event.title,
                tickets=ticket_count,
                event_date=event.start_time,
            )
        )
        return booking

    def _reserve(
        self, caller: Caller, event_id: EventId, ticket_count: int, key: str
    ) -> _Reservation:
        # Caller holds the key lock and the event lock.
        if self._stores.bookings.find(lambda b: b.idempotency_key == key) is not None:
            raise DuplicateRequestError(key)

        event = self._stores.events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        if not event.is_active:
            raise EventUnavailableError(event_id)
        if event.start_time < self._clock.now():
            raise EventExpiredError(event_id)
        if ticket_count > event.available_tickets:
            raise InsufficientInventoryError(ticket_count, event.available_tickets)

        user = self._stores.users.get(caller.user_id)
        if user is None:
            raise UserNotFoundError(caller.user_id)

        booking = Booking(
            id=BookingId(self._ids.new_id()),
            user_id=user.id,
            event_id=event_id,
            ticket_count=ticket_count,
            created_at=self._clock.now(),
            idempotency_key=key,
        )
        with self._stores.atomic():
            self._stores.events.update(
                event_id, available_tickets=event.available_tickets - ticket_count
            )
            self._stores.bookings.insert(booking)
        return _Reservation(booking=booking, event=event, user=user)

    def _owned_event(self, caller: Caller, event_id: EventId) -> Event:
        event = self._stores.events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        if event.organizer_id != caller.user_id:
            raise UnauthorizedError()
        return event

    def _validated_changes(self, patch: EventPatch) -> dict[str, Any]:
        if not patch.changed_fields():
            raise InvalidInputError("Nothing to update")

        changes: dict[str, Any] = {}
        if patch.title is not None:
            changes["title"] = require_text(patch.title, "Title")
        if patch.description is not None:
            changes["description"] = patch.description
        if patch.start_time is not None:
            changes["start_time"] = require_start_time(patch.start_time)
        if patch.location is not None:
            changes["location"] = require_text(patch.location, "Location")
        if patch.total_tickets is not None:
            changes["total_tickets"] = require_ticket_count(
                patch.total_tickets, "Total tickets"
            )
        if patch.price is not None:
            changes["price"] = require_price(patch.price)
        if patch.image_ref is not None:
            changes["image_ref"] = patch.image_ref or None
        return changes

    def _notify(self, job: NotificationJob) -> None:
        try:
            self._dispatcher.enqueue(job)
        except Exception:
            logger.exception("Could not enqueue {} job", job.kind.value)
