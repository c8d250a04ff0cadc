"""App-level options read from ``settings.TICKETING``."""

from dataclasses import dataclass
from typing import Any, Self

DEFAULTS: dict[str, Any] = {
    "NOTIFICATION_WORKERS": 2,
    "RECENT_BOOKINGS_LIMIT": 10,
    "LOW_STOCK_THRESHOLD": 50,
    "LOG_LEVEL": "INFO",
}


@dataclass(frozen=True)
class EngineConfig:
    notification_workers: int = DEFAULTS["NOTIFICATION_WORKERS"]
    recent_bookings_limit: int = DEFAULTS["RECENT_BOOKINGS_LIMIT"]
    low_stock_threshold: int = DEFAULTS["LOW_STOCK_THRESHOLD"]
    log_level: str = DEFAULTS["LOG_LEVEL"]

    def __post_init__(self) -> None:
        if self.notification_workers < 1:
            raise ValueError("NOTIFICATION_WORKERS must be at least 1")
        if self.recent_bookings_limit < 0:
            raise ValueError("RECENT_BOOKINGS_LIMIT cannot be negative")

    @classmethod
    def from_mapping(cls, options: dict[str, Any]) -> Self:
        merged = {**DEFAULTS, **options}
        return cls(
            notification_workers=int(merged["NOTIFICATION_WORKERS"]),
            recent_bookings_limit=int(merged["RECENT_BOOKINGS_LIMIT"]),
            low_stock_threshold=int(merged["LOW_STOCK_THRESHOLD"]),
            log_level=str(merged["LOG_LEVEL"]).upper(),
        )

    @classmethod
    def from_settings(cls) -> Self:
        from django.conf import settings

        return cls.from_mapping(getattr(settings, "TICKETING", {}))
