"""Ledger lookups shared by the payment handlers and the reminder sweep."""

from __future__ import annotations

import calendar
from decimal import Decimal
from typing import Optional, Tuple

from shared.domain.exceptions import InvalidInput
from shared.domain.value_objects import BillingPeriod
from shared.infrastructure.locking import lock_if_possible

from .models import Transaction


def to_period(month, year) -> BillingPeriod:
    """Validate a client supplied month/year pair."""
    try:
        return BillingPeriod(month=int(month), year=int(year))
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid billing period: {month}/{year}") from exc


def month_name(month: int) -> str:
    return calendar.month_name[month]


def find_month_entry(booking_id: int, period: BillingPeriod, *, lock: bool = False) -> Optional[Transaction]:
    qs = Transaction.objects.filter(booking_id=booking_id, month=period.month, year=period.year)
    if lock:
        qs = lock_if_possible(qs)
    return qs.first()


def get_or_create_month_entry(booking, period: BillingPeriod, *, total_expected=None) -> Tuple[Transaction, bool]:
    """
    Locked ledger entry for one booking month, created ``pending`` when absent

    ``total_expected`` defaults to the property's monthly price.
    """
    entry = find_month_entry(booking.pk, period, lock=True)
    if entry is not None:
        return entry, False

    prop = booking.property
    entry = Transaction.objects.create(
        tenant_id=booking.tenant_id,
        property_id=prop.pk,
        booking_id=booking.pk,
        month=period.month,
        year=period.year,
        month_name=month_name(period.month),
        total_expected=Decimal(total_expected) if total_expected is not None else prop.price,
        description=f"Monthly rent for {prop.title} - {period.label}",
    )
    return entry, True


def outstanding_for_period(booking, period: BillingPeriod) -> Tuple[Decimal, Decimal, Optional[Transaction]]:
    """
    ``(total_expected, total_paid, entry)`` for a booking month

    Without a ledger entry the month is expected at the property price
    with nothing paid.
    """
    entry = find_month_entry(booking.pk, period)
    if entry is None:
        return booking.property.price, Decimal("0.00"), None
    return entry.total_expected, entry.total_paid, entry


def remaining_due(total_expected: Decimal, total_paid: Decimal) -> Decimal:
    return max(Decimal(total_expected) - Decimal(total_paid), Decimal("0.00"))
