"""API views for the booking domain.

Views only translate HTTP into commands; permission and state checks
live in the command handlers so every entry point enforces them.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.application.message_bus import message_bus
from shared.infrastructure.identity import actor_from_request

from .application.command_handlers import (
    CancelBookingCommand,
    CreateBookingCommand,
    DecideBookingCommand,
    DeleteBookingCommand,
)
from .application.leave_handlers import CreateLeaveRequestCommand, DecideLeaveRequestCommand
from .models import Booking, LeaveRequest
from .serializers import (
    BookingCreateSerializer,
    BookingDecisionSerializer,
    BookingSerializer,
    LeaveRequestCreateSerializer,
    LeaveRequestDecisionSerializer,
    LeaveRequestSerializer,
)


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Bookings visible to the caller plus the lifecycle transitions."""

    queryset = Booking.objects.select_related("property", "tenant", "property__owner").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "property"]
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        actor = actor_from_request(self.request)
        if actor.is_admin:
            return qs
        if actor.is_owner:
            return qs.filter(property__owner_id=actor.user_id)
        return qs.filter(tenant_id=actor.user_id)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = message_bus.handle_command(
            CreateBookingCommand(
                actor=actor_from_request(request),
                property_id=data["property"],
                start_date=data.get("start_date"),
                end_date=data.get("end_date"),
                message=data.get("message", ""),
            )
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):  # type: ignore
        message_bus.handle_command(
            DeleteBookingCommand(actor=actor_from_request(request), booking_id=int(pk))
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def decide(self, request, pk=None):  # type: ignore
        serializer = BookingDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            DecideBookingCommand(
                actor=actor_from_request(request),
                booking_id=int(pk),
                status=serializer.validated_data["status"],
                rejection_reason=serializer.validated_data.get("rejection_reason", ""),
            )
        )
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking = message_bus.handle_command(
            CancelBookingCommand(actor=actor_from_request(request), booking_id=int(pk))
        )
        return Response({"id": booking.pk, "status": booking.status})


class LeaveRequestViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Leave requests raised by tenants and resolved by owners."""

    queryset = LeaveRequest.objects.select_related("booking", "booking__property", "tenant", "owner").all()
    serializer_class = LeaveRequestSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status"]
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        actor = actor_from_request(self.request)
        if actor.is_admin:
            return qs
        if actor.is_owner:
            return qs.filter(owner_id=actor.user_id)
        return qs.filter(tenant_id=actor.user_id)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = LeaveRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        leave_request = message_bus.handle_command(
            CreateLeaveRequestCommand(
                actor=actor_from_request(request),
                booking_id=serializer.validated_data["booking"],
                message=serializer.validated_data.get("message", ""),
            )
        )
        return Response(LeaveRequestSerializer(leave_request).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def decide(self, request, pk=None):  # type: ignore
        serializer = LeaveRequestDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        leave_request = message_bus.handle_command(
            DecideLeaveRequestCommand(
                actor=actor_from_request(request),
                leave_request_id=int(pk),
                decision=data["decision"],
                condition=data.get("condition") or None,
                note=data.get("note", ""),
            )
        )
        return Response(LeaveRequestSerializer(leave_request).data)
