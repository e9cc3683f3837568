"""
Notification Event Handlers

Turn committed domain events into notification payloads and hand them to
the ``notifications.deliver_notification`` Celery task. These run after
the unit of work commits, so a failure here never rolls back a booking
or payment.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
import logging

from django.utils import timezone

from apps.bookings.domain.events import (
    BookingCancelled,
    BookingDecided,
    BookingRequested,
    LeaveRequestDecided,
    LeaveRequested,
)
from apps.finances.domain.events import MonthlyPaymentRecorded, PaymentStatusChanged, RentDueReminder

logger = logging.getLogger(__name__)

BOOKINGS_LINK = '/dashboard?tab=bookings'
TRANSACTIONS_LINK = '/dashboard?tab=transactions'


def notify(
    user_id: int,
    title: str,
    message: str,
    link: str = '',
    metadata: Optional[dict[str, Any]] = None,
    property_id: Optional[int] = None,
) -> None:
    """Enqueue delivery of one notification; errors are logged only."""
    from .tasks import deliver_notification

    try:
        deliver_notification.delay(
            user_id=user_id,
            title=title,
            message=message,
            link=link,
            metadata=metadata or {},
            property_id=property_id,
        )
    except Exception as e:
        logger.error(f"Could not enqueue notification '{title}' for user {user_id}: {e}")


def _date(value: Optional[datetime]) -> str:
    return timezone.localtime(value).strftime('%d.%m.%Y') if value else ''


def _datetime(value: Optional[datetime]) -> str:
    return timezone.localtime(value).strftime('%d.%m.%Y %H:%M') if value else ''


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


# ===== Booking =====

def on_booking_requested(event: BookingRequested) -> None:
    notify(
        event.owner_id,
        'New booking request',
        f"{event.tenant_name} requested to book {event.property_title} "
        f"({_date(event.start_date)} - {_date(event.end_date)}).",
        BOOKINGS_LINK,
        {'booking_id': event.booking_id, 'property_id': event.property_id},
        property_id=event.property_id,
    )


def on_booking_decided(event: BookingDecided) -> None:
    if event.status == 'approved':
        title = 'Booking approved'
        message = f"Your booking for {event.property_title} was approved."
    else:
        title = 'Booking rejected'
        reason = f": {event.rejection_reason}" if event.rejection_reason else ''
        message = f"Your booking for {event.property_title} was rejected{reason}."
    notify(
        event.tenant_id,
        title,
        message,
        BOOKINGS_LINK,
        {'booking_id': event.booking_id, 'property_id': event.property_id},
        property_id=event.property_id,
    )


def on_booking_cancelled(event: BookingCancelled) -> None:
    notify(
        event.owner_id,
        'Booking cancelled',
        f"{event.tenant_name} cancelled a booking for {event.property_title}.",
        BOOKINGS_LINK,
        {'booking_id': event.booking_id, 'property_id': event.property_id, 'previous_status': event.old_status},
        property_id=event.property_id,
    )


# ===== Leave requests =====

def on_leave_requested(event: LeaveRequested) -> None:
    notify(
        event.owner_id,
        'Leave request received',
        f"{event.tenant_name} requested to leave early for {event.property_title}.",
        BOOKINGS_LINK,
        {'booking_id': event.booking_id, 'leave_request_id': event.leave_request_id},
        property_id=event.property_id,
    )


def on_leave_request_decided(event: LeaveRequestDecided) -> None:
    metadata = {'booking_id': event.booking_id, 'leave_request_id': event.leave_request_id}
    if event.approved:
        metadata['effective_end_date'] = event.effective_end_date.isoformat() if event.effective_end_date else None
        notify(
            event.tenant_id,
            'Leave request approved',
            f"Your leave was approved. Effective end date: {_datetime(event.effective_end_date)}",
            BOOKINGS_LINK,
            metadata,
            property_id=event.property_id,
        )
        return

    note = f" Note: {event.note}" if event.note else ''
    notify(
        event.tenant_id,
        'Leave request rejected',
        f"Your leave request was rejected.{note}",
        BOOKINGS_LINK,
        metadata,
        property_id=event.property_id,
    )


# ===== Payments =====

def on_payment_status_changed(event: PaymentStatusChanged) -> None:
    status_text = event.status.capitalize()
    metadata = {
        'transaction_id': event.transaction_id,
        'booking_id': event.booking_id,
        'property_id': event.property_id,
    }
    notify(
        event.tenant_id,
        f"Transaction {status_text}",
        f"Your transaction for {event.property_title} is {status_text}.",
        TRANSACTIONS_LINK,
        metadata,
        property_id=event.property_id,
    )
    notify(
        event.owner_id,
        f"Tenant payment {status_text}",
        f"A tenant's payment for {event.property_title} is {status_text}.",
        TRANSACTIONS_LINK,
        metadata,
        property_id=event.property_id,
    )


def on_monthly_payment_recorded(event: MonthlyPaymentRecorded) -> None:
    if event.total_paid >= event.total_expected:
        status_text = 'Fully Paid'
    else:
        status_text = f"Partially Paid ({_money(event.total_paid)}/{_money(event.total_expected)})"
    period = f" ({event.month_name})" if event.month_name else ''
    notify(
        event.owner_id,
        'Rent payment received',
        f"{event.tenant_name} paid {_money(event.amount)} for {event.property_title}{period}. "
        f"Status: {status_text}",
        f"{TRANSACTIONS_LINK}&transactionId={event.transaction_id}",
        {
            'transaction_id': event.transaction_id,
            'booking_id': event.booking_id,
            'property_id': event.property_id,
        },
        property_id=event.property_id,
    )


def on_rent_due(event: RentDueReminder) -> None:
    message = (
        f"Monthly rent due for {event.property_title} ({event.period_label}). "
        f"Paid {_money(event.total_paid)} of {_money(event.total_expected)}. "
        f"Due {_money(event.due)}."
    )
    metadata = {
        'booking_id': event.booking_id,
        'property_id': event.property_id,
        'month': event.month,
        'year': event.year,
    }
    notify(event.tenant_id, 'Rent due reminder', message, TRANSACTIONS_LINK, metadata, property_id=event.property_id)
    notify(event.owner_id, 'Tenant due reminder', message, TRANSACTIONS_LINK, metadata, property_id=event.property_id)


EVENT_HANDLERS = {
    BookingRequested: on_booking_requested,
    BookingDecided: on_booking_decided,
    BookingCancelled: on_booking_cancelled,
    LeaveRequested: on_leave_requested,
    LeaveRequestDecided: on_leave_request_decided,
    PaymentStatusChanged: on_payment_status_changed,
    MonthlyPaymentRecorded: on_monthly_payment_recorded,
    RentDueReminder: on_rent_due,
}


def register(bus) -> None:
    bus.register_event_handlers(EVENT_HANDLERS)
