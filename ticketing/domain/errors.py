"""Domain error codes for the ticketing module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    DUPLICATE_REQUEST = "DUPLICATE_REQUEST"
    EMAIL_TAKEN = "EMAIL_TAKEN"
    EVENT_UNAVAILABLE = "EVENT_UNAVAILABLE"
    EVENT_EXPIRED = "EVENT_EXPIRED"
    CAPACITY_BELOW_DEMAND = "CAPACITY_BELOW_DEMAND"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidInputError(DomainError):
    """Raised when a request is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_INPUT, message=message)


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: object) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message="Event not found")
        self.event_id = event_id


class UserNotFoundError(DomainError):
    """Raised when a user is not found."""

    def __init__(self, user_id: object) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message="User not found")
        self.user_id = user_id


class UnauthorizedError(DomainError):
    """Raised when the caller may not act on a resource."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(code=ErrorCode.UNAUTHORIZED, message=message)


class DuplicateRequestError(DomainError):
    """Raised when an idempotency key has already been used."""

    def __init__(self, idempotency_key: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_REQUEST,
            message="Duplicate booking detected",
        )
        self.idempotency_key = idempotency_key


class EmailTakenError(DomainError):
    """Raised when registering an email that already exists."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.EMAIL_TAKEN, message="Email already exists")


class EventUnavailableError(DomainError):
    """Raised when booking an event that is no longer active."""

    def __init__(self, event_id: object) -> None:
        super().__init__(
            code=ErrorCode.EVENT_UNAVAILABLE,
            message="Event is not available",
        )
        self.event_id = event_id


class EventExpiredError(DomainError):
    """Raised when booking an event that has already started."""

    def __init__(self, event_id: object) -> None:
        super().__init__(
            code=ErrorCode.EVENT_EXPIRED,
            message="Cannot book past events",
        )
        self.event_id = event_id


class CapacityBelowDemandError(DomainError):
    """Raised when total tickets would drop below tickets already booked."""

    def __init__(self, booked_tickets: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_BELOW_DEMAND,
            message=f"Cannot reduce tickets below {booked_tickets} (already booked)",
        )
        self.booked_tickets = booked_tickets


class InsufficientInventoryError(DomainError):
    """Raised when more tickets are requested than remain."""

    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            code=ErrorCode.INSUFFICIENT_INVENTORY,
            message="Not enough tickets available",
        )
        self.requested = requested
        self.available = available
