"""Process-wide wiring of stores, dispatcher and services."""

from dataclasses import dataclass
from functools import lru_cache

from ticketing.config import EngineConfig
from ticketing.services.account_service import AccountService
from ticketing.services.booking_engine import BookingEngine
from ticketing.services.notifications import EmailNotifier, NotificationDispatcher
from ticketing.services.query_service import BookingQueryService
from ticketing.stores.interfaces import Stores


@dataclass(frozen=True)
class Services:
    engine: BookingEngine
    queries: BookingQueryService
    accounts: AccountService
    dispatcher: NotificationDispatcher


def build_services(stores: Stores, config: EngineConfig | None = None) -> Services:
    config = config or EngineConfig()
    dispatcher = NotificationDispatcher(
        EmailNotifier(), workers=config.notification_workers
    )
    return Services(
        engine=BookingEngine(stores, dispatcher),
        queries=BookingQueryService(
            stores,
            recent_limit=config.recent_bookings_limit,
            low_stock_threshold=config.low_stock_threshold,
        ),
        accounts=AccountService(stores),
        dispatcher=dispatcher,
    )


@lru_cache(maxsize=1)
def get_services() -> Services:
    """Services backed by the Django database, built once per process."""
    from ticketing.stores.django_store import django_stores

    return build_services(django_stores(), EngineConfig.from_settings())
