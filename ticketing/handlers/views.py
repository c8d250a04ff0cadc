"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from loguru import logger
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing.container import Services, get_services
from ticketing.domain import Role
from ticketing.domain.errors import DomainError, ErrorCode
from ticketing.handlers.identity import resolve_caller
from ticketing.handlers.serializers import (
    BookingRequestSerializer,
    BookingSerializer,
    BookingWithBookerSerializer,
    BookingWithEventSerializer,
    EventCreateSerializer,
    EventPatchSerializer,
    EventSerializer,
    OrganizerSummarySerializer,
    RegisterSerializer,
    UserSerializer,
)
from ticketing.stores.interfaces import StoreUnavailableError

STATUS_BY_CODE = {
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DUPLICATE_REQUEST: status.HTTP_409_CONFLICT,
    ErrorCode.EMAIL_TAKEN: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_UNAVAILABLE: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_EXPIRED: status.HTTP_409_CONFLICT,
    ErrorCode.CAPACITY_BELOW_DEMAND: status.HTTP_409_CONFLICT,
    ErrorCode.INSUFFICIENT_INVENTORY: status.HTTP_409_CONFLICT,
}


class ServiceView(APIView):
    """Base view that maps service failures to error responses."""

    @property
    def services(self) -> Services:
        return get_services()

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, DomainError):
            return Response(
                {"code": exc.code.value, "message": exc.message},
                status=STATUS_BY_CODE[exc.code],
            )
        if isinstance(exc, ValidationError):
            return Response(
                {
                    "code": ErrorCode.INVALID_INPUT.value,
                    "message": "Invalid request",
                    "fields": exc.detail,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        if isinstance(exc, StoreUnavailableError):
            logger.error(
                "Store unavailable during {} {}: {}",
                self.request.method,
                self.request.path,
                exc,
            )
            return Response(
                {"code": "SERVICE_UNAVAILABLE", "message": "Service temporarily unavailable"},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return super().handle_exception(exc)

    def event_context(self) -> dict:
        return {"queries": self.services.queries}


class UserListView(ServiceView):
    """Handler for POST /api/users"""

    def post(self, request: Request) -> Response:
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = self.services.accounts.register(
            name=data["name"],
            email=data["email"],
            password_hash=data["password_hash"],
            role=Role(data["role"]),
        )
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class EventListView(ServiceView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        events = self.services.queries.list_events(request.query_params.get("search"))
        return Response(EventSerializer(events, many=True, context=self.event_context()).data)

    def post(self, request: Request) -> Response:
        caller = resolve_caller(request)
        serializer = EventCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = self.services.engine.create_event(caller, serializer.to_draft())
        return Response(
            EventSerializer(event, context=self.event_context()).data,
            status=status.HTTP_201_CREATED,
        )


class EventDetailView(ServiceView):
    """Handler for GET/PATCH/DELETE /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = self.services.queries.get_event(event_id)
        return Response(EventSerializer(event, context=self.event_context()).data)

    def patch(self, request: Request, event_id: str) -> Response:
        caller = resolve_caller(request)
        serializer = EventPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = self.services.engine.update_event(caller, event_id, serializer.to_patch())
        return Response(EventSerializer(event, context=self.event_context()).data)

    def delete(self, request: Request, event_id: str) -> Response:
        caller = resolve_caller(request)
        self.services.engine.delete_event(caller, event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventBookingListView(ServiceView):
    """Handler for GET /api/events/{event_id}/bookings"""

    def get(self, request: Request, event_id: str) -> Response:
        caller = resolve_caller(request)
        rows = self.services.queries.get_event_bookings(caller, event_id)
        return Response(BookingWithBookerSerializer(rows, many=True).data)


class BookingListView(ServiceView):
    """Handler for POST /api/bookings"""

    def post(self, request: Request) -> Response:
        caller = resolve_caller(request)
        serializer = BookingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = self.services.engine.create_booking(
            caller,
            str(data["event_id"]),
            data["tickets"],
            data["idempotency_key"],
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class MyBookingListView(ServiceView):
    """Handler for GET /api/bookings/mine"""

    def get(self, request: Request) -> Response:
        caller = resolve_caller(request)
        rows = self.services.queries.get_my_bookings(caller)
        return Response(
            BookingWithEventSerializer(rows, many=True, context=self.event_context()).data
        )


class OrganizerSummaryView(ServiceView):
    """Handler for GET /api/organizer/summary"""

    def get(self, request: Request) -> Response:
        caller = resolve_caller(request)
        summary = self.services.queries.organizer_summary(caller)
        return Response(OrganizerSummarySerializer(summary).data)
