"""
Booking Command Handlers

These are the use cases for the booking lifecycle.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Tenant requests a booking
- DecideBookingCommand: Owner/admin approves or rejects a pending booking
- CancelBookingCommand: Tenant cancels a pending or approved booking
- DeleteBookingCommand: Tenant, owner or admin removes a booking and its ledger
"""

from dataclasses import dataclass
from typing import Any
import logging

from django.utils import timezone

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import Forbidden, InvalidInput, InvalidState, NotFound
from shared.domain.value_objects import Actor
from shared.infrastructure.locking import lock_if_possible
from apps.bookings.domain.events import BookingCancelled, BookingDecided, BookingRequested
from apps.bookings.domain.policies import compute_total_amount, sanitize_booking_window
from apps.bookings.models import Booking, LeaveRequest
from apps.properties.models import Property
from apps.properties.services import reconcile_property_availability

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to request a booking

    Dates arrive as the client sent them and are sanitized by the handler.
    """
    actor: Actor
    property_id: int
    start_date: Any = None
    end_date: Any = None
    message: str = ''


@dataclass
class DecideBookingCommand:
    """Command to approve or reject a pending booking"""
    actor: Actor
    booking_id: int
    status: str
    rejection_reason: str = ''


@dataclass
class CancelBookingCommand:
    """Command to cancel a booking"""
    actor: Actor
    booking_id: int


@dataclass
class DeleteBookingCommand:
    """Command to delete a booking together with its transactions"""
    actor: Actor
    booking_id: int


def load_booking_for_update(booking_id: int) -> Booking:
    """Fetch a booking with its row locked for the current transaction."""
    booking = lock_if_possible(Booking.objects.filter(pk=booking_id)).first()
    if booking is None:
        raise NotFound("Booking not found")
    return booking


def tenant_display_name(user_id: int, fallback: str = 'A tenant') -> str:
    from apps.users.models import User

    user = User.objects.filter(pk=user_id).first()
    return user.display_name if user else fallback


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    1. Lock the property row
    2. Check it is Available and not owned by the tenant
    3. Sanitize the requested window and price it
    4. Create the pending booking and record BookingRequested
    """

    def handle(self, command: CreateBookingCommand) -> Booking:
        actor = command.actor
        if not actor.is_tenant:
            raise Forbidden("Only tenants can request bookings")

        now = timezone.now()
        with DjangoUnitOfWork() as uow:
            prop = lock_if_possible(Property.objects.filter(pk=command.property_id)).first()
            if prop is None:
                raise NotFound("Property not found")
            if prop.availability_status != Property.AvailabilityStatus.AVAILABLE:
                raise InvalidState("Property is not available for booking")
            if prop.owner_id == actor.user_id:
                raise Forbidden("You cannot book your own property")

            window = sanitize_booking_window(command.start_date, command.end_date, now)

            booking = Booking.objects.create(
                tenant_id=actor.user_id,
                property=prop,
                start_date=window.start,
                end_date=window.end,
                total_amount=compute_total_amount(window, prop.price),
                message=(command.message or '')[:500],
            )

            uow.add_event(BookingRequested(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                property_id=prop.pk,
                property_title=prop.title,
                owner_id=prop.owner_id,
                tenant_id=actor.user_id,
                tenant_name=tenant_display_name(actor.user_id),
                start_date=window.start,
                end_date=window.end,
            ))

        logger.info(
            f"Booking {booking.pk} requested for property {prop.pk} "
            f"by tenant {actor.user_id}, {window}, total {booking.total_amount}"
        )
        return booking


class DecideBookingHandler:
    """Handler for the owner's approve/reject decision"""

    ALLOWED = (Booking.Status.APPROVED, Booking.Status.REJECTED)

    def handle(self, command: DecideBookingCommand) -> Booking:
        if command.status not in self.ALLOWED:
            raise InvalidInput(f"Invalid status: {command.status}")

        actor = command.actor
        with DjangoUnitOfWork() as uow:
            booking = load_booking_for_update(command.booking_id)
            prop = booking.property
            if not (actor.is_admin or prop.owner_id == actor.user_id):
                raise Forbidden("Access denied")
            if not booking.is_pending:
                raise InvalidState(f"Booking is already {booking.status}")
            if command.status == Booking.Status.APPROVED and booking.end_date <= timezone.now():
                raise InvalidState("Booking has already ended")

            booking.status = command.status
            if command.status == Booking.Status.REJECTED and command.rejection_reason:
                booking.rejection_reason = command.rejection_reason[:500]
            booking.save(update_fields=["status", "rejection_reason", "updated_at"])

            reconcile_property_availability(prop.pk)

            uow.add_event(BookingDecided(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                property_id=prop.pk,
                property_title=prop.title,
                tenant_id=booking.tenant_id,
                status=booking.status,
                rejection_reason=booking.rejection_reason,
            ))

        logger.info(f"Booking {booking.pk} {booking.status} by user {actor.user_id}")
        return booking


class CancelBookingHandler:
    """Handler for tenant cancellation"""

    def handle(self, command: CancelBookingCommand) -> Booking:
        actor = command.actor
        with DjangoUnitOfWork() as uow:
            booking = load_booking_for_update(command.booking_id)
            if booking.tenant_id != actor.user_id:
                raise Forbidden("Access denied")
            if booking.status not in Booking.CANCELLABLE_STATUSES:
                raise InvalidState("Booking cannot be cancelled")

            old_status = booking.status
            booking.status = Booking.Status.CANCELLED
            booking.save(update_fields=["status", "updated_at"])

            prop = booking.property
            reconcile_property_availability(prop.pk)

            uow.add_event(BookingCancelled(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                property_id=prop.pk,
                property_title=prop.title,
                owner_id=prop.owner_id,
                tenant_name=tenant_display_name(actor.user_id, fallback='Tenant'),
                old_status=old_status,
            ))

        logger.info(f"Booking {booking.pk} cancelled by tenant (was {old_status})")
        return booking


class DeleteBookingHandler:
    """
    Handler for deleting a booking

    Dependent transactions and leave requests go first, then the booking;
    availability is reconciled in the same transaction.
    """

    def handle(self, command: DeleteBookingCommand) -> int:
        from apps.finances.models import Transaction

        actor = command.actor
        with DjangoUnitOfWork():
            booking = load_booking_for_update(command.booking_id)
            prop = booking.property
            is_tenant = booking.tenant_id == actor.user_id
            is_owner = prop.owner_id == actor.user_id
            if not (is_tenant or is_owner or actor.is_admin):
                raise Forbidden("Access denied")

            booking_id = booking.pk
            deleted_transactions, _ = Transaction.objects.filter(booking_id=booking_id).delete()
            LeaveRequest.objects.filter(booking_id=booking_id).delete()
            booking.delete()

            reconcile_property_availability(prop.pk)

        logger.info(
            f"Booking {booking_id} deleted by user {actor.user_id} "
            f"({deleted_transactions} transaction rows removed)"
        )
        return booking_id


def register(bus) -> None:
    """Wire booking commands into the message bus"""
    bus.register_command_handlers({
        CreateBookingCommand: CreateBookingHandler(),
        DecideBookingCommand: DecideBookingHandler(),
        CancelBookingCommand: CancelBookingHandler(),
        DeleteBookingCommand: DeleteBookingHandler(),
    })
