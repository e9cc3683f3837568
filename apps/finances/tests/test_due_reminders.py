"""Tests for the periodic rent due reminder sweep."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from apps.bookings.models import Booking
from apps.finances.models import ReminderRun, Transaction
from apps.finances.tasks import run_due_reminder_sweep, send_due_reminders
from apps.notifications.models import Notification

pytestmark = pytest.mark.django_db


def at(*args) -> datetime:
    return timezone.make_aware(datetime(*args))


AFTER_GRACE = at(2024, 2, 3, 12, 0)


@pytest.fixture
def january_booking(make_booking):
    return make_booking(at(2024, 1, 1), at(2024, 3, 1))


def test_nothing_is_sent_during_grace_period(january_booking):
    summary = run_due_reminder_sweep(now=at(2024, 2, 2, 10, 0))

    assert summary["skipped"] == "grace_period"
    assert summary["period"] == "2024-01"
    assert not ReminderRun.objects.exists()
    assert not Notification.objects.exists()


def test_unpaid_month_reminds_tenant_and_owner(owner, tenant, prop, january_booking):
    summary = run_due_reminder_sweep(now=AFTER_GRACE)

    assert summary["skipped"] is None
    assert summary["checked"] == 1
    assert summary["reminded"] == 1

    tenant_note = Notification.objects.get(user=tenant)
    assert tenant_note.title == "Rent due reminder"
    assert "January 2024" in tenant_note.message
    assert "Due $100.00" in tenant_note.message
    assert tenant_note.metadata == {
        "booking_id": january_booking.pk,
        "property_id": prop.pk,
        "month": 1,
        "year": 2024,
    }
    assert Notification.objects.get(user=owner).title == "Tenant due reminder"

    run = ReminderRun.objects.get(month=1, year=2024)
    assert run.last_run_at == AFTER_GRACE
    assert run.reminders_sent == 1


def test_partial_payment_reminds_about_the_rest(tenant, prop, january_booking):
    Transaction.objects.create(
        booking=january_booking,
        tenant=tenant,
        property=prop,
        month=1,
        year=2024,
        total_expected=Decimal("100.00"),
        total_paid=Decimal("70.00"),
        status=Transaction.Status.UNPAID,
    )

    run_due_reminder_sweep(now=AFTER_GRACE)

    assert "Due $30.00" in Notification.objects.get(user=tenant).message


def test_reminders_are_not_repeated_within_the_interval(january_booking):
    run_due_reminder_sweep(now=AFTER_GRACE)

    repeat = run_due_reminder_sweep(now=at(2024, 2, 4, 12, 0))
    assert repeat["skipped"] == "recently_sent"
    assert Notification.objects.count() == 2

    later = run_due_reminder_sweep(now=at(2024, 2, 5, 12, 0))
    assert later["reminded"] == 1
    assert Notification.objects.count() == 4


def test_settled_and_out_of_period_bookings_are_skipped(tenant, prop, make_booking, january_booking):
    Transaction.objects.create(
        booking=january_booking,
        tenant=tenant,
        property=prop,
        month=1,
        year=2024,
        total_expected=Decimal("100.00"),
        total_paid=Decimal("100.00"),
        status=Transaction.Status.PAID,
    )
    make_booking(at(2024, 2, 10), at(2024, 3, 10))
    make_booking(at(2024, 1, 5), at(2024, 1, 20), status=Booking.Status.PENDING)

    summary = run_due_reminder_sweep(now=AFTER_GRACE)

    assert summary["checked"] == 1
    assert summary["reminded"] == 0
    assert not Notification.objects.exists()


def test_free_properties_are_ignored(prop, january_booking):
    prop.price = Decimal("0.00")
    prop.save()

    assert run_due_reminder_sweep(now=AFTER_GRACE)["checked"] == 0


def test_periodic_task_uses_the_clock(freeze_now, january_booking):
    freeze_now(AFTER_GRACE)

    result = send_due_reminders.delay().get()

    assert result["reminded"] == 1


def test_management_command_reports_summary(freeze_now, january_booking):
    freeze_now(AFTER_GRACE)
    out = StringIO()

    call_command("send_due_reminders", stdout=out)
    call_command("send_due_reminders", stdout=out)

    output = out.getvalue()
    assert "2024-01: reminded 1 of 1 bookings" in output
    assert "Skipped 2024-01: recently_sent" in output
