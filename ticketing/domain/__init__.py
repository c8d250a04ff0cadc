from ticketing.domain.models import (
    Booking,
    BookingWithBooker,
    BookingWithEvent,
    Event,
    EventDraft,
    EventPatch,
    NotificationJob,
    NotificationKind,
    OrganizerSummary,
    User,
)
from ticketing.domain.value_objects import (
    BookingId,
    Caller,
    EventId,
    EventStatus,
    Money,
    Role,
    UserId,
)

__all__ = [
    "User",
    "Event",
    "Booking",
    "EventDraft",
    "EventPatch",
    "NotificationJob",
    "NotificationKind",
    "BookingWithEvent",
    "BookingWithBooker",
    "OrganizerSummary",
    "UserId",
    "EventId",
    "BookingId",
    "Money",
    "Role",
    "EventStatus",
    "Caller",
]
