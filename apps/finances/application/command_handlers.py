"""
Payment Ledger Command Handlers

Commands:
- PayCommand: Tenant moves a ledger entry to paid/unpaid/advanced
- RecordMonthlyPaymentCommand: Tenant records a (partial) monthly payment
- DeleteTransactionCommand: Tenant, owner or admin removes a ledger entry

No money moves here; a payment is a status transition applied by a
trusted caller.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple
import logging

from django.utils import timezone

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import Forbidden, InvalidInput, InvalidState, NotFound
from shared.domain.value_objects import Actor
from shared.infrastructure.locking import lock_if_possible
from apps.bookings.application.command_handlers import load_booking_for_update, tenant_display_name
from apps.bookings.models import Booking
from apps.finances.domain.events import MonthlyPaymentRecorded, PaymentStatusChanged
from apps.finances.models import Transaction
from apps.finances.services import get_or_create_month_entry, remaining_due, to_period
from apps.properties.services import reconcile_property_availability

logger = logging.getLogger(__name__)


def to_amount(raw: Any, *, required: bool = False) -> Optional[Decimal]:
    """Parse a client amount; negative or malformed values are rejected."""
    if raw is None or raw == '':
        if required:
            raise InvalidInput("Amount is required")
        return None
    try:
        value = Decimal(str(raw))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInput(f"Invalid amount: {raw}") from exc
    if not value.is_finite() or value < 0:
        raise InvalidInput(f"Invalid amount: {raw}")
    return value.quantize(Decimal("0.01"))


def to_payment_method(raw: Optional[str]) -> str:
    if not raw:
        return Transaction.PaymentMethod.CREDIT_CARD
    if raw not in Transaction.PaymentMethod.values:
        raise InvalidInput(f"Invalid payment method: {raw}")
    return raw


# ===== Commands =====

@dataclass
class PayCommand:
    """
    Command to pay a ledger entry

    The entry is addressed either by ``transaction_id`` or by
    ``booking_id`` + ``month`` + ``year``; in the latter case a missing
    entry is created as pending first.
    """
    actor: Actor
    transaction_id: Optional[int] = None
    booking_id: Optional[int] = None
    month: Optional[int] = None
    year: Optional[int] = None
    amount: Any = None
    payment_method: Optional[str] = None
    desired_status: Optional[str] = None


@dataclass
class RecordMonthlyPaymentCommand:
    actor: Actor
    booking_id: int
    amount: Any
    month: Optional[int] = None
    year: Optional[int] = None
    payment_method: Optional[str] = None
    total_expected: Any = None


@dataclass
class DeleteTransactionCommand:
    actor: Actor
    transaction_id: int


# ===== Command Handlers =====

class PayHandler:
    """
    Handler for Pay command

    - paid settles the entry and completes an approved booking
    - unpaid/advanced accumulate ``amount`` into total_paid
    - an amount above the remaining due is rejected
    """

    def handle(self, command: PayCommand) -> Transaction:
        actor = command.actor
        new_status = command.desired_status
        if new_status not in Transaction.SETTABLE_STATUSES:
            new_status = Transaction.Status.PAID
        amount = to_amount(command.amount)
        method = to_payment_method(command.payment_method)
        now = timezone.now()

        with DjangoUnitOfWork() as uow:
            entry, booking = self._load_entry(command)
            if entry.tenant_id != actor.user_id:
                raise Forbidden("Access denied")
            if entry.status not in Transaction.PAYABLE_STATUSES:
                raise InvalidState("Transaction cannot be updated in its current state")

            due = entry.due
            if amount is not None and amount > due:
                raise InvalidInput(
                    f"Payment amount ({amount}) exceeds remaining due amount ({due})",
                    remaining_due=str(due),
                    current_paid=str(entry.total_paid),
                    total_expected=str(entry.total_expected),
                )

            if new_status == Transaction.Status.PAID:
                entry.total_paid = entry.total_expected
            elif amount is not None:
                entry.total_paid += amount

            entry.status = new_status
            entry.amount = entry.total_paid
            entry.payment_method = method
            if new_status in (Transaction.Status.PAID, Transaction.Status.ADVANCED):
                entry.payment_date = now
            entry.save()

            booking_completed = False
            if new_status == Transaction.Status.PAID and booking.is_approved:
                booking.status = Booking.Status.COMPLETED
                booking.save(update_fields=["status", "updated_at"])
                booking_completed = True
                reconcile_property_availability(booking.property_id, now=now)

            prop = entry.property
            uow.add_event(PaymentStatusChanged(
                aggregate_id=entry.pk,
                transaction_id=entry.pk,
                booking_id=entry.booking_id,
                property_id=prop.pk,
                property_title=prop.title,
                tenant_id=entry.tenant_id,
                owner_id=prop.owner_id,
                status=entry.status,
                booking_completed=booking_completed,
            ))

        logger.info(
            f"Transaction {entry.reference} -> {entry.status} "
            f"(paid {entry.total_paid}/{entry.total_expected}, booking completed: {booking_completed})"
        )
        return entry

    def _load_entry(self, command: PayCommand) -> Tuple[Transaction, Booking]:
        """Lock the booking, then its ledger entry."""
        if command.transaction_id is not None:
            booking_id = (
                Transaction.objects.filter(pk=command.transaction_id)
                .values_list("booking_id", flat=True)
                .first()
            )
            if booking_id is None:
                raise NotFound("Transaction not found")
            booking = load_booking_for_update(booking_id)
            entry = lock_if_possible(Transaction.objects.filter(pk=command.transaction_id)).first()
            if entry is None:
                raise NotFound("Transaction not found")
            return entry, booking

        if command.booking_id is None or command.month is None or command.year is None:
            raise InvalidInput("Either a transaction or a booking with month and year is required")

        period = to_period(command.month, command.year)
        booking = load_booking_for_update(command.booking_id)
        if booking.tenant_id != command.actor.user_id:
            raise Forbidden("Access denied")
        entry, created = get_or_create_month_entry(booking, period)
        if created:
            logger.info(f"Created ledger entry {entry.reference} for booking {booking.pk} {period}")
        return entry, booking


class RecordMonthlyPaymentHandler:
    """
    Handler for partial monthly payments

    Accumulates into the month's entry (or a new one) and derives the
    status from the running total: paid once settled, unpaid before.
    Booking status is left untouched.
    """

    def handle(self, command: RecordMonthlyPaymentCommand) -> Transaction:
        actor = command.actor
        amount = to_amount(command.amount, required=True)
        if amount <= 0:
            raise InvalidInput("Amount must be positive")
        method = to_payment_method(command.payment_method)
        expected_override = to_amount(command.total_expected)
        now = timezone.now()

        with DjangoUnitOfWork() as uow:
            booking = load_booking_for_update(command.booking_id)
            if booking.tenant_id != actor.user_id:
                raise Forbidden("Access denied")
            prop = booking.property
            expected = expected_override or prop.price or amount

            if command.month is not None and command.year is not None:
                period = to_period(command.month, command.year)
                entry, _ = get_or_create_month_entry(booking, period, total_expected=expected)
                label = entry.month_name
            else:
                entry = Transaction(
                    tenant_id=booking.tenant_id,
                    property_id=prop.pk,
                    booking_id=booking.pk,
                    description=f"Payment for {prop.title}",
                )
                label = ''

            due = remaining_due(expected, entry.total_paid)
            if amount > due:
                raise InvalidInput(
                    f"Payment amount ({amount}) exceeds remaining due amount ({due})",
                    remaining_due=str(due),
                    current_paid=str(entry.total_paid),
                    total_expected=str(expected),
                )
            if entry.status not in Transaction.PAYABLE_STATUSES:
                raise InvalidState("Transaction cannot be updated in its current state")

            entry.total_expected = expected
            entry.total_paid += amount
            entry.amount = entry.total_paid
            entry.payment_method = method
            entry.payment_date = now
            entry.status = (
                Transaction.Status.PAID if entry.is_due_cleared else Transaction.Status.UNPAID
            )
            entry.save()

            uow.add_event(MonthlyPaymentRecorded(
                aggregate_id=entry.pk,
                transaction_id=entry.pk,
                booking_id=booking.pk,
                property_id=prop.pk,
                property_title=prop.title,
                owner_id=prop.owner_id,
                tenant_name=tenant_display_name(actor.user_id, fallback='Tenant'),
                amount=amount,
                total_paid=entry.total_paid,
                total_expected=entry.total_expected,
                month_name=label,
            ))

        logger.info(
            f"Recorded {amount} on {entry.reference} for booking {booking.pk} "
            f"({entry.total_paid}/{entry.total_expected}, {entry.status})"
        )
        return entry


class DeleteTransactionHandler:
    def handle(self, command: DeleteTransactionCommand) -> int:
        actor = command.actor
        with DjangoUnitOfWork():
            entry = lock_if_possible(Transaction.objects.filter(pk=command.transaction_id)).first()
            if entry is None:
                raise NotFound("Transaction not found")
            is_tenant = entry.tenant_id == actor.user_id
            is_owner = entry.property.owner_id == actor.user_id
            if not (is_tenant or is_owner or actor.is_admin):
                raise Forbidden("Access denied")
            reference = entry.reference
            entry.delete()

        logger.info(f"Transaction {reference} deleted by user {actor.user_id}")
        return command.transaction_id


def register(bus) -> None:
    bus.register_command_handlers({
        PayCommand: PayHandler(),
        RecordMonthlyPaymentCommand: RecordMonthlyPaymentHandler(),
        DeleteTransactionCommand: DeleteTransactionHandler(),
    })
