"""Input coercion shared by the services."""

from datetime import datetime
from decimal import Decimal

from ticketing.domain import EventId, Money, UserId
from ticketing.domain.errors import InvalidInputError


def coerce_event_id(event_id: EventId | str) -> EventId:
    if isinstance(event_id, EventId):
        return event_id
    try:
        return EventId.from_string(event_id)
    except (TypeError, ValueError, AttributeError):
        raise InvalidInputError("Invalid event ID format") from None


def coerce_user_id(user_id: UserId | str) -> UserId:
    if isinstance(user_id, UserId):
        return user_id
    try:
        return UserId.from_string(user_id)
    except (TypeError, ValueError, AttributeError):
        raise InvalidInputError("Invalid user ID format") from None


def require_text(value: str | None, name: str) -> str:
    if value is None or not value.strip():
        raise InvalidInputError(f"{name} is required")
    return value.strip()


def require_ticket_count(value: int, name: str = "Ticket count") -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidInputError(f"{name} must be a positive integer")
    return value


def require_start_time(value: datetime | None) -> datetime:
    if not isinstance(value, datetime) or value.tzinfo is None:
        raise InvalidInputError("Start time must be a timezone-aware datetime")
    return value


def require_price(price: Decimal | int | str | None) -> Money:
    if price is None or isinstance(price, bool):
        raise InvalidInputError("Price is required")
    try:
        return Money(Decimal(price))
    except (ArithmeticError, ValueError):
        raise InvalidInputError("Price must be a non-negative amount") from None
