"""Serializers for request parsing and for rendering domain models.

Input serializers check request format only; business rules stay in the
services. Output serializers read domain dataclasses directly.
"""

from rest_framework import serializers

from ticketing.domain import EventDraft, EventPatch, Role

PRICE_FIELD = {"max_digits": 10, "decimal_places": 2}


class EventCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True, default="")
    start_time = serializers.DateTimeField()
    location = serializers.CharField(max_length=255)
    total_tickets = serializers.IntegerField()
    price = serializers.DecimalField(**PRICE_FIELD)
    image_ref = serializers.CharField(
        max_length=500, required=False, allow_null=True, allow_blank=True
    )

    def to_draft(self) -> EventDraft:
        data = self.validated_data
        return EventDraft(
            title=data["title"],
            description=data["description"],
            start_time=data["start_time"],
            location=data["location"],
            total_tickets=data["total_tickets"],
            price=data["price"],
            image_ref=data.get("image_ref") or None,
        )


class EventPatchSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(allow_blank=True, required=False)
    start_time = serializers.DateTimeField(required=False)
    location = serializers.CharField(max_length=255, required=False)
    total_tickets = serializers.IntegerField(required=False)
    price = serializers.DecimalField(required=False, **PRICE_FIELD)
    image_ref = serializers.CharField(max_length=500, required=False, allow_blank=True)

    def to_patch(self) -> EventPatch:
        return EventPatch(**self.validated_data)


class BookingRequestSerializer(serializers.Serializer):
    event_id = serializers.UUIDField()
    tickets = serializers.IntegerField()
    idempotency_key = serializers.CharField(max_length=255)


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(max_length=255)
    password_hash = serializers.CharField(max_length=255)
    role = serializers.ChoiceField(
        choices=[role.value for role in Role], default=Role.CUSTOMER.value
    )


class UserSerializer(serializers.Serializer):
    """Public view of a User. Never includes the password hash."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    email = serializers.EmailField()
    role = serializers.CharField(source="role.value")


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    start_time = serializers.DateTimeField()
    location = serializers.CharField()
    total_tickets = serializers.IntegerField()
    available_tickets = serializers.IntegerField()
    organizer_id = serializers.UUIDField(source="organizer_id.value")
    price = serializers.DecimalField(source="price.amount", **PRICE_FIELD)
    status = serializers.CharField(source="status.value")
    image_ref = serializers.CharField(allow_null=True)
    stock = serializers.SerializerMethodField()

    def get_stock(self, event) -> str | None:
        queries = self.context.get("queries")
        return queries.stock_label(event) if queries is not None else None


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.UUIDField(source="id.value")
    user_id = serializers.UUIDField(source="user_id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    ticket_count = serializers.IntegerField()
    created_at = serializers.DateTimeField()
    idempotency_key = serializers.CharField()


class BookingWithEventSerializer(serializers.Serializer):
    booking = BookingSerializer()
    event = EventSerializer(allow_null=True)


class BookingWithBookerSerializer(serializers.Serializer):
    booking = BookingSerializer()
    user = UserSerializer(allow_null=True)


class OrganizerSummarySerializer(serializers.Serializer):
    event_count = serializers.IntegerField()
    tickets_sold = serializers.IntegerField()
    booking_count = serializers.IntegerField()
    revenue = serializers.DecimalField(source="revenue.amount", max_digits=14, decimal_places=2)
    recent_bookings = BookingWithBookerSerializer(many=True)
