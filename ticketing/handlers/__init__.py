from ticketing.handlers.views import (
    BookingListView,
    EventBookingListView,
    EventDetailView,
    EventListView,
    MyBookingListView,
    OrganizerSummaryView,
    UserListView,
)

__all__ = [
    "BookingListView",
    "EventBookingListView",
    "EventDetailView",
    "EventListView",
    "MyBookingListView",
    "OrganizerSummaryView",
    "UserListView",
]
