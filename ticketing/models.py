"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class User(models.Model):
    """Persistence model for users."""

    class Role(models.TextChoices):
        CUSTOMER = "customer"
        ORGANIZER = "organizer"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255, unique=True)
    password_hash = models.CharField(max_length=255)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.CUSTOMER)

    def __str__(self) -> str:
        return self.email


class Event(models.Model):
    """Persistence model for events."""

    class Status(models.TextChoices):
        ACTIVE = "active"
        CANCELLED = "cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    start_time = models.DateTimeField()
    location = models.CharField(max_length=255)
    total_tickets = models.PositiveIntegerField()
    available_tickets = models.PositiveIntegerField()
    organizer = models.ForeignKey(User, on_delete=models.PROTECT, related_name="events")
    price = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.ACTIVE)
    image_ref = models.CharField(max_length=500, blank=True, null=True)

    class Meta:
        ordering = ["start_time"]
        indexes = [
            models.Index(fields=["status", "start_time"], name="event_status_start_idx"),
            models.Index(fields=["organizer"], name="event_organizer_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(available_tickets__lte=models.F("total_tickets")),
                name="available_tickets_within_total",
            ),
        ]

    def __str__(self) -> str:
        return self.title


class Booking(models.Model):
    """Persistence model for bookings."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.PROTECT, related_name="bookings")
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="bookings")
    ticket_count = models.PositiveIntegerField()
    created_at = models.DateTimeField()
    idempotency_key = models.CharField(max_length=255, unique=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["event"], name="booking_event_idx"),
            models.Index(fields=["user", "-created_at"], name="booking_user_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user} - {self.event} x{self.ticket_count}"
