"""Celery tasks for the rent ledger."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.db import DatabaseError, transaction  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.message_bus import message_bus
from shared.domain.value_objects import BillingPeriod
from shared.infrastructure.locking import lock_if_possible
from apps.bookings.models import Booking

from .domain.events import RentDueReminder
from .models import ReminderRun
from .services import outstanding_for_period, remaining_due

logger = logging.getLogger(__name__)


def claim_reminder_run(period: BillingPeriod, now: datetime, interval_days: int) -> Optional[ReminderRun]:
    """
    Take the period's run slot under a row lock

    Returns None when reminders for the period went out less than
    ``interval_days`` ago.
    """
    with transaction.atomic():
        ReminderRun.objects.get_or_create(month=period.month, year=period.year)
        run = lock_if_possible(
            ReminderRun.objects.filter(month=period.month, year=period.year)
        ).get()
        if run.last_run_at and now - run.last_run_at < timedelta(days=interval_days):
            return None
        run.last_run_at = now
        run.save(update_fields=["last_run_at"])
    return run


def run_due_reminder_sweep(now: Optional[datetime] = None) -> dict[str, Any]:
    """
    Remind tenants and owners about rent still due for the previous month

    Runs only after the grace period following the month end, and at most
    once per reminder interval for a given month.
    """
    now = now or timezone.now()
    period = BillingPeriod.previous(now)
    grace_days = getattr(settings, "DUE_REMINDER_GRACE_DAYS", 2)
    interval_days = getattr(settings, "DUE_REMINDER_INTERVAL_DAYS", 2)
    summary: dict[str, Any] = {
        "period": str(period),
        "skipped": None,
        "checked": 0,
        "reminded": 0,
        "errors": 0,
    }

    if now < period.end + timedelta(days=grace_days):
        summary["skipped"] = "grace_period"
        return summary

    run = claim_reminder_run(period, now, interval_days)
    if run is None:
        summary["skipped"] = "recently_sent"
        return summary

    bookings = Booking.objects.filter(
        status=Booking.Status.APPROVED,
        start_date__lte=period.end,
        end_date__gte=period.start,
        property__price__gt=0,
    ).select_related("property", "tenant")

    events = []
    for booking in bookings:
        summary["checked"] += 1
        try:
            expected, paid, entry = outstanding_for_period(booking, period)
        except DatabaseError as exc:
            summary["errors"] += 1
            logger.error(f"Could not read ledger for booking {booking.pk}: {exc}")
            continue

        due = remaining_due(expected, paid)
        if due <= 0:
            continue

        prop = booking.property
        events.append(RentDueReminder(
            aggregate_id=booking.pk,
            booking_id=booking.pk,
            property_id=prop.pk,
            property_title=prop.title,
            tenant_id=booking.tenant_id,
            tenant_name=booking.tenant.display_name,
            owner_id=prop.owner_id,
            month=period.month,
            year=period.year,
            period_label=period.label,
            total_expected=expected,
            total_paid=paid,
            due=due,
            transaction_id=entry.pk if entry else None,
        ))

    message_bus.publish_events(events)
    summary["reminded"] = len(events)

    run.reminders_sent = len(events)
    run.save(update_fields=["reminders_sent"])

    logger.info(
        f"Due reminders for {period}: {summary['reminded']} of {summary['checked']} bookings"
    )
    return summary


@shared_task(name="finances.send_due_reminders")
def send_due_reminders() -> dict[str, Any]:
    """
    Periodic due-reminder sweep.

    Scheduled every 12 hours through Celery Beat. Failures are logged and
    reported in the returned summary instead of being raised.
    """
    try:
        return run_due_reminder_sweep()
    except Exception as e:
        logger.error(f"Error in send_due_reminders: {e}", exc_info=True)
        return {"error": str(e)}
