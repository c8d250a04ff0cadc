"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from ticketing.domain.value_objects import (
    BookingId,
    EventId,
    EventStatus,
    Money,
    Role,
    UserId,
)


@dataclass(frozen=True)
class User:
    """Domain representation of a User."""

    id: UserId
    name: str
    email: str
    password_hash: str
    role: Role


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event.

    Ticket counts are validated on every construction, so no Event value can
    exist with ``available_tickets`` outside ``0..total_tickets``.
    """

    id: EventId
    title: str
    description: str
    start_time: datetime
    location: str
    total_tickets: int
    available_tickets: int
    organizer_id: UserId
    price: Money
    status: EventStatus = EventStatus.ACTIVE
    image_ref: str | None = None

    def __post_init__(self) -> None:
        if self.total_tickets < 0:
            raise ValueError("Total tickets cannot be negative")
        if not 0 <= self.available_tickets <= self.total_tickets:
            raise ValueError("Available tickets must be between 0 and total tickets")

    @property
    def is_active(self) -> bool:
        return self.status is EventStatus.ACTIVE

    @property
    def sold_tickets(self) -> int:
        return self.total_tickets - self.available_tickets


@dataclass(frozen=True)
class Booking:
    """Domain representation of a Booking."""

    id: BookingId
    user_id: UserId
    event_id: EventId
    ticket_count: int
    created_at: datetime
    idempotency_key: str

    def __post_init__(self) -> None:
        if self.ticket_count < 1:
            raise ValueError("A booking holds at least one ticket")


@dataclass(frozen=True)
class EventDraft:
    """Organizer input for a new event."""

    title: str
    description: str
    start_time: datetime
    location: str
    total_tickets: int
    price: Decimal
    image_ref: str | None = None


@dataclass(frozen=True)
class EventPatch:
    """Partial event update. ``None`` means the field is left unchanged.

    An empty ``image_ref`` clears the image.
    """

    title: str | None = None
    description: str | None = None
    start_time: datetime | None = None
    location: str | None = None
    total_tickets: int | None = None
    price: Decimal | None = None
    image_ref: str | None = None

    def changed_fields(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]


class NotificationKind(Enum):
    BOOKING_CONFIRMATION = "BOOKING_CONFIRMATION"
    EVENT_UPDATE = "EVENT_UPDATE"


@dataclass(frozen=True)
class NotificationJob:
    """Transient side-effect job. Never persisted."""

    id: UUID
    kind: NotificationKind
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BookingWithEvent:
    booking: Booking
    event: Event | None


@dataclass(frozen=True)
class BookingWithBooker:
    booking: Booking
    user: User | None


@dataclass(frozen=True)
class OrganizerSummary:
    """Aggregates shown on the organizer dashboard."""

    event_count: int
    tickets_sold: int
    revenue: Money
    booking_count: int = 0
    recent_bookings: tuple[BookingWithBooker, ...] = ()
