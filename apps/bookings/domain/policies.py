"""
Booking Policies

Pure date and pricing rules used by the booking and leave-request
handlers. Every function takes ``now`` explicitly so callers decide
which clock applies.
"""

from datetime import datetime, time
from decimal import Decimal
from typing import Optional

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from shared.domain.exceptions import InvalidInput
from shared.domain.value_objects import ONE_DAY, DateRange, end_of_month


def parse_moment(raw) -> Optional[datetime]:
    """
    Parse a client-supplied date into an aware datetime

    Accepts datetimes, ISO datetime strings and plain ``YYYY-MM-DD``
    dates (midnight, current time zone). Returns None for anything that
    cannot be understood.
    """
    if raw is None or raw == '':
        return None
    if isinstance(raw, datetime):
        value = raw
    else:
        text = str(raw).strip()
        try:
            value = parse_datetime(text)
            if value is None:
                day = parse_date(text)
                value = datetime.combine(day, time.min) if day else None
        except ValueError:
            value = None
    if value is None:
        return None
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    return value


def sanitize_booking_window(raw_start, raw_end, now: datetime) -> DateRange:
    """
    Normalize requested booking dates

    - an unparseable start becomes ``now``
    - an unparseable end, or one not after start, becomes start + 1 day
    - a start on a calendar day before today is rejected
    - a start too late to add a day to is rejected
    """
    start = parse_moment(raw_start) or now
    end = parse_moment(raw_end)
    if end is None or end <= start:
        try:
            end = start + ONE_DAY
        except OverflowError as exc:
            raise InvalidInput("Invalid booking dates") from exc

    if timezone.localdate(start) < timezone.localdate(now):
        raise InvalidInput("Start date cannot be in the past")

    return DateRange(start, end)


def compute_total_amount(window: DateRange, price: Decimal) -> Decimal:
    """Whole billable days times the property price."""
    return Decimal(window.billable_days) * Decimal(price)


def compute_effective_end_date(condition: str, booking_end: datetime, now: datetime) -> datetime:
    """
    Resolve when an approved leave request ends the occupancy

    - immediate: now
    - end_of_month: last instant of the current month
    - end_of_next_month: last instant of the following month
    - end_of_current_booking: the booking's own end date
    """
    from apps.bookings.models import LeaveRequest

    if condition == LeaveRequest.Condition.IMMEDIATE:
        return now
    if condition == LeaveRequest.Condition.END_OF_MONTH:
        return end_of_month(now)
    if condition == LeaveRequest.Condition.END_OF_NEXT_MONTH:
        return end_of_month(now, months_ahead=1)
    if condition == LeaveRequest.Condition.END_OF_CURRENT_BOOKING:
        return booking_end
    raise InvalidInput(f"Unknown leave condition: {condition}")
