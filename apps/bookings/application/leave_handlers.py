"""
Leave Request Command Handlers

A tenant with an approved booking can ask to leave early; the owner (or an
admin) resolves the request and decides when the occupancy ends.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from django.db import IntegrityError
from django.utils import timezone

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import ConflictExists, Forbidden, InvalidInput, InvalidState, NotFound
from shared.domain.value_objects import Actor
from shared.infrastructure.locking import lock_if_possible
from apps.bookings.application.command_handlers import load_booking_for_update, tenant_display_name
from apps.bookings.domain.events import LeaveRequestDecided, LeaveRequested
from apps.bookings.domain.policies import compute_effective_end_date
from apps.bookings.models import Booking, LeaveRequest
from apps.properties.services import reconcile_property_availability

logger = logging.getLogger(__name__)


@dataclass
class CreateLeaveRequestCommand:
    actor: Actor
    booking_id: int
    message: str = ''


@dataclass
class DecideLeaveRequestCommand:
    """
    Command to resolve a leave request

    ``condition`` only matters on approval; when omitted the booking runs
    to its own end date.
    """
    actor: Actor
    leave_request_id: int
    decision: str
    condition: Optional[str] = None
    note: str = ''


class CreateLeaveRequestHandler:
    """Tenant asks to end an approved booking early"""

    def handle(self, command: CreateLeaveRequestCommand) -> LeaveRequest:
        actor = command.actor
        with DjangoUnitOfWork() as uow:
            booking = load_booking_for_update(command.booking_id)
            if booking.tenant_id != actor.user_id:
                raise Forbidden("Only the booking's tenant can request to leave")
            if not booking.is_approved:
                raise InvalidState("Leave can only be requested for an approved booking")

            if LeaveRequest.objects.filter(
                booking_id=booking.pk, status=LeaveRequest.Status.PENDING
            ).exists():
                raise ConflictExists("A leave request is already pending for this booking")

            prop = booking.property
            try:
                leave_request = LeaveRequest.objects.create(
                    booking=booking,
                    tenant_id=actor.user_id,
                    owner_id=prop.owner_id,
                    message=(command.message or '')[:1000],
                )
            except IntegrityError as exc:
                raise ConflictExists("A leave request is already pending for this booking") from exc

            uow.add_event(LeaveRequested(
                aggregate_id=leave_request.pk,
                leave_request_id=leave_request.pk,
                booking_id=booking.pk,
                property_id=prop.pk,
                property_title=prop.title,
                owner_id=prop.owner_id,
                tenant_name=tenant_display_name(actor.user_id, fallback='Tenant'),
            ))

        logger.info(f"Leave request {leave_request.pk} created for booking {booking.pk}")
        return leave_request


class DecideLeaveRequestHandler:
    """
    Owner resolves a leave request

    On approval the effective end date is resolved from the condition; the
    booking is shortened when that date is earlier than its end and
    completed when the date has already been reached.
    """

    APPROVE = 'approve'
    REJECT = 'reject'

    def handle(self, command: DecideLeaveRequestCommand) -> LeaveRequest:
        if command.decision not in (self.APPROVE, self.REJECT):
            raise InvalidInput(f"Invalid decision: {command.decision}")

        actor = command.actor
        now = timezone.now()
        with DjangoUnitOfWork() as uow:
            leave_request = lock_if_possible(
                LeaveRequest.objects.filter(pk=command.leave_request_id)
            ).first()
            if leave_request is None:
                raise NotFound("Leave request not found")
            if not (actor.is_admin or leave_request.owner_id == actor.user_id):
                raise Forbidden("Access denied")
            if not leave_request.is_pending:
                raise InvalidState(f"Leave request is already {leave_request.status}")

            booking = load_booking_for_update(leave_request.booking_id)
            leave_request.decision_note = (command.note or '')[:1000]
            leave_request.decided_at = now
            booking_completed = False

            if command.decision == self.REJECT:
                leave_request.status = LeaveRequest.Status.REJECTED
            else:
                condition = command.condition or LeaveRequest.Condition.END_OF_CURRENT_BOOKING
                effective_end = compute_effective_end_date(condition, booking.end_date, now)

                leave_request.status = LeaveRequest.Status.APPROVED
                leave_request.condition = condition
                leave_request.effective_end_date = effective_end

                fields = []
                if effective_end < booking.end_date and effective_end > booking.start_date:
                    booking.end_date = effective_end
                    fields.append("end_date")
                if effective_end <= now and booking.status == Booking.Status.APPROVED:
                    booking.status = Booking.Status.COMPLETED
                    booking_completed = True
                    fields.append("status")
                if fields:
                    booking.save(update_fields=fields + ["updated_at"])

            leave_request.save()
            reconcile_property_availability(booking.property_id, now=now)

            uow.add_event(LeaveRequestDecided(
                aggregate_id=leave_request.pk,
                leave_request_id=leave_request.pk,
                booking_id=booking.pk,
                property_id=booking.property_id,
                tenant_id=leave_request.tenant_id,
                approved=leave_request.status == LeaveRequest.Status.APPROVED,
                note=leave_request.decision_note,
                condition=leave_request.condition,
                effective_end_date=leave_request.effective_end_date,
                booking_completed=booking_completed,
            ))

        logger.info(
            f"Leave request {leave_request.pk} {leave_request.status} "
            f"(condition={leave_request.condition}, end={leave_request.effective_end_date})"
        )
        return leave_request


def register(bus) -> None:
    bus.register_command_handlers({
        CreateLeaveRequestCommand: CreateLeaveRequestHandler(),
        DecideLeaveRequestCommand: DecideLeaveRequestHandler(),
    })
