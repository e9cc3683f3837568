"""Rent ledger models."""

from __future__ import annotations

import builtins
import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


def generate_reference() -> str:
    return f"TXN{uuid.uuid4().hex[:12].upper()}"


class Transaction(models.Model):
    """One ledger entry, normally one calendar month of one booking."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        UNPAID = "unpaid", _("Unpaid")
        ADVANCED = "advanced", _("Advanced")
        COMPLETED = "completed", _("Completed")
        FAILED = "failed", _("Failed")
        REFUNDED = "refunded", _("Refunded")

    class PaymentMethod(models.TextChoices):
        CREDIT_CARD = "credit_card", _("Credit card")
        DEBIT_CARD = "debit_card", _("Debit card")
        BANK_TRANSFER = "bank_transfer", _("Bank transfer")
        CASH = "cash", _("Cash")

    PAYABLE_STATUSES = (Status.PENDING, Status.UNPAID, Status.ADVANCED)
    SETTABLE_STATUSES = (Status.PAID, Status.UNPAID, Status.ADVANCED)

    tenant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="transactions",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="transactions",
    )
    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="transactions",
    )
    month = models.PositiveSmallIntegerField(null=True, blank=True)
    year = models.PositiveIntegerField(null=True, blank=True)
    month_name = models.CharField(max_length=20, blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_expected = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_paid = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.BANK_TRANSFER,
    )
    payment_date = models.DateTimeField(null=True, blank=True)
    reference = models.CharField(max_length=32, unique=True, default=generate_reference, editable=False)
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Transaction")
        verbose_name_plural = _("Transactions")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["booking", "month", "year"],
                condition=models.Q(month__isnull=False),
                name="one_transaction_per_booking_month",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant", "status"]),
            models.Index(fields=["property", "year", "month"]),
        ]

    def __str__(self) -> str:
        return f"{self.reference} ({self.status})"

    @builtins.property
    def due(self) -> Decimal:
        return max(self.total_expected - self.total_paid, Decimal("0.00"))

    @builtins.property
    def is_due_cleared(self) -> bool:
        return self.total_paid >= self.total_expected


class ReminderRun(models.Model):
    """Last time due reminders were sent for a billing period."""

    month = models.PositiveSmallIntegerField()
    year = models.PositiveIntegerField()
    last_run_at = models.DateTimeField(null=True, blank=True)
    reminders_sent = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = _("Reminder run")
        verbose_name_plural = _("Reminder runs")
        constraints = [
            models.UniqueConstraint(fields=["month", "year"], name="one_reminder_run_per_period"),
        ]

    def __str__(self) -> str:
        return f"Reminders {self.year}-{self.month:02d} (last {self.last_run_at})"
