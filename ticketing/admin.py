from django.contrib import admin

from ticketing.models import Booking, Event, User


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    readonly_fields = ["user", "ticket_count", "created_at", "idempotency_key"]
    can_delete = False


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "role"]
    search_fields = ["name", "email"]
    list_filter = ["role"]
    exclude = ["password_hash"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "location",
        "start_time",
        "available_tickets",
        "total_tickets",
        "status",
    ]
    search_fields = ["title", "location"]
    list_filter = ["status", "organizer"]
    readonly_fields = ["available_tickets"]
    inlines = [BookingInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["event", "user", "ticket_count", "created_at"]
    list_filter = ["event"]
    readonly_fields = ["user", "event", "ticket_count", "created_at", "idempotency_key"]
