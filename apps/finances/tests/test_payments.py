"""Command-level tests for the rent ledger."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from unittest import mock

import pytest
from django.utils import timezone

from apps.bookings.models import Booking
from apps.finances.application.command_handlers import (
    DeleteTransactionCommand,
    PayCommand,
    RecordMonthlyPaymentCommand,
)
from apps.finances.models import Transaction
from apps.notifications.models import Notification
from apps.properties.models import Property
from shared.application.message_bus import message_bus
from shared.domain.exceptions import Forbidden, InvalidInput, InvalidState, NotFound
from shared.domain.value_objects import Actor
from shared.infrastructure.locking import lock_if_possible

pytestmark = pytest.mark.django_db


def at(*args) -> datetime:
    return timezone.make_aware(datetime(*args))


NOW = at(2024, 2, 5, 12, 0)


@pytest.fixture(autouse=True)
def _now(freeze_now):
    return freeze_now(NOW)


@pytest.fixture
def booking(prop, make_booking):
    prop.availability_status = Property.AvailabilityStatus.BOOKED
    prop.save()
    return make_booking(at(2024, 1, 1), at(2024, 3, 1))


@pytest.fixture
def entry(booking, tenant, prop):
    return Transaction.objects.create(
        booking=booking,
        tenant=tenant,
        property=prop,
        month=1,
        year=2024,
        month_name="January",
        total_expected=Decimal("100.00"),
    )


def pay(user, **kwargs):
    return message_bus.handle_command(PayCommand(actor=Actor.from_user(user), **kwargs))


def record(user, booking, amount, **kwargs):
    return message_bus.handle_command(
        RecordMonthlyPaymentCommand(actor=Actor.from_user(user), booking_id=booking.pk, amount=amount, **kwargs)
    )


def test_paying_in_full_completes_the_booking(tenant, prop, booking, entry):
    paid = pay(tenant, transaction_id=entry.pk)

    assert paid.status == Transaction.Status.PAID
    assert paid.total_paid == Decimal("100.00")
    assert paid.amount == Decimal("100.00")
    assert paid.payment_method == Transaction.PaymentMethod.CREDIT_CARD
    assert paid.payment_date == NOW
    booking.refresh_from_db()
    assert booking.status == Booking.Status.COMPLETED
    prop.refresh_from_db()
    assert prop.availability_status == Property.AvailabilityStatus.AVAILABLE


def test_settled_entry_cannot_be_paid_again(tenant, entry):
    pay(tenant, transaction_id=entry.pk)
    with pytest.raises(InvalidState):
        pay(tenant, transaction_id=entry.pk)


def test_only_the_tenant_pays(owner, entry):
    with pytest.raises(Forbidden):
        pay(owner, transaction_id=entry.pk)


def test_unknown_transaction_is_not_found(tenant):
    with pytest.raises(NotFound):
        pay(tenant, transaction_id=12345)


def test_partial_payments_accumulate_without_completing(tenant, booking, entry):
    first = pay(tenant, transaction_id=entry.pk, amount="30", desired_status="unpaid")
    assert first.total_paid == Decimal("30.00")
    assert first.status == Transaction.Status.UNPAID

    second = pay(tenant, transaction_id=entry.pk, amount="20.50", desired_status="advanced")
    assert second.total_paid == Decimal("50.50")
    assert second.due == Decimal("49.50")
    assert second.status == Transaction.Status.ADVANCED

    booking.refresh_from_db()
    assert booking.status == Booking.Status.APPROVED


def test_overpayment_reports_the_remaining_due(tenant, entry):
    pay(tenant, transaction_id=entry.pk, amount="60", desired_status="unpaid")

    with pytest.raises(InvalidInput) as excinfo:
        pay(tenant, transaction_id=entry.pk, amount="50", desired_status="unpaid")

    assert excinfo.value.details == {
        "remaining_due": "40.00",
        "current_paid": "60.00",
        "total_expected": "100.00",
    }
    entry.refresh_from_db()
    assert entry.total_paid == Decimal("60.00")


def test_unknown_desired_status_means_paid(tenant, entry):
    assert pay(tenant, transaction_id=entry.pk, desired_status="refunded").status == Transaction.Status.PAID


def test_invalid_amount_and_method_are_rejected(tenant, entry):
    with pytest.raises(InvalidInput):
        pay(tenant, transaction_id=entry.pk, amount="-5", desired_status="unpaid")
    with pytest.raises(InvalidInput):
        pay(tenant, transaction_id=entry.pk, payment_method="barter")


def test_pay_by_period_creates_missing_entry(tenant, booking):
    paid = pay(tenant, booking_id=booking.pk, month=2, year=2024, amount="40", desired_status="unpaid")

    assert paid.month == 2
    assert paid.month_name == "February"
    assert paid.total_expected == Decimal("100.00")
    assert paid.total_paid == Decimal("40.00")
    assert Transaction.objects.filter(booking=booking, month=2, year=2024).count() == 1

    again = pay(tenant, booking_id=booking.pk, month=2, year=2024)
    assert again.pk == paid.pk
    assert again.status == Transaction.Status.PAID


def test_pay_by_period_validates_period(tenant, booking):
    with pytest.raises(InvalidInput):
        pay(tenant, booking_id=booking.pk, month=13, year=2024)
    with pytest.raises(InvalidInput):
        pay(tenant, booking_id=booking.pk, month=2)


def test_monthly_payments_settle_the_month(tenant, booking):
    partial = record(tenant, booking, "60", month=1, year=2024)
    assert partial.status == Transaction.Status.UNPAID
    assert partial.total_expected == Decimal("100.00")

    settled = record(tenant, booking, "40", month=1, year=2024, payment_method="cash")
    assert settled.pk == partial.pk
    assert settled.status == Transaction.Status.PAID
    assert settled.total_paid == Decimal("100.00")
    assert settled.payment_method == Transaction.PaymentMethod.CASH

    booking.refresh_from_db()
    assert booking.status == Booking.Status.APPROVED

    with pytest.raises(InvalidInput):
        record(tenant, booking, "1", month=1, year=2024)


def test_monthly_payment_without_period_is_standalone(tenant, booking):
    first = record(tenant, booking, "25")
    second = record(tenant, booking, "25")

    assert first.pk != second.pk
    assert first.month is None
    assert first.status == Transaction.Status.UNPAID


def test_monthly_payment_respects_expected_override(tenant, booking):
    settled = record(tenant, booking, "80", month=2, year=2024, total_expected="80")
    assert settled.total_expected == Decimal("80.00")
    assert settled.status == Transaction.Status.PAID


def test_monthly_payment_requires_positive_amount(tenant, booking):
    with pytest.raises(InvalidInput):
        record(tenant, booking, "0")
    with pytest.raises(InvalidInput):
        record(tenant, booking, None)


def test_monthly_payment_notifies_owner(owner, tenant, booking, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        record(tenant, booking, "60", month=1, year=2024)

    notification = Notification.objects.get(user=owner)
    assert notification.title == "Rent payment received"
    assert "Partially Paid ($60.00/$100.00)" in notification.message
    assert "(January)" in notification.message


def test_payment_status_notifies_both_parties(owner, tenant, entry, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        pay(tenant, transaction_id=entry.pk)

    assert Notification.objects.get(user=tenant).title == "Transaction Paid"
    assert Notification.objects.get(user=owner).title == "Tenant payment Paid"


def test_delete_transaction_permissions(owner, tenant, make_user, entry):
    with pytest.raises(Forbidden):
        message_bus.handle_command(
            DeleteTransactionCommand(actor=Actor.from_user(make_user("x@example.com")), transaction_id=entry.pk)
        )

    message_bus.handle_command(DeleteTransactionCommand(actor=Actor.from_user(owner), transaction_id=entry.pk))
    assert not Transaction.objects.filter(pk=entry.pk).exists()


@pytest.mark.parametrize("by_id", [True, False])
def test_pay_locks_booking_before_ledger_entry(tenant, booking, entry, by_id):
    locked = []

    def recording_lock(queryset):
        locked.append(queryset.model)
        return lock_if_possible(queryset)

    with mock.patch(
        "apps.bookings.application.command_handlers.lock_if_possible", side_effect=recording_lock
    ), mock.patch(
        "apps.finances.application.command_handlers.lock_if_possible", side_effect=recording_lock
    ), mock.patch("apps.finances.services.lock_if_possible", side_effect=recording_lock):
        if by_id:
            pay(tenant, transaction_id=entry.pk)
        else:
            pay(tenant, booking_id=booking.pk, month=1, year=2024)

    assert locked[0] is Booking
    assert Transaction in locked
    assert locked.index(Transaction) > locked.index(Booking)
