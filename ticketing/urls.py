from django.urls import path

from ticketing.handlers import (
    BookingListView,
    EventBookingListView,
    EventDetailView,
    EventListView,
    MyBookingListView,
    OrganizerSummaryView,
    UserListView,
)

urlpatterns = [
    path("users", UserListView.as_view(), name="user-list"),
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/bookings",
        EventBookingListView.as_view(),
        name="event-booking-list",
    ),
    path("bookings", BookingListView.as_view(), name="booking-list"),
    path("bookings/mine", MyBookingListView.as_view(), name="my-booking-list"),
    path("organizer/summary", OrganizerSummaryView.as_view(), name="organizer-summary"),
]
