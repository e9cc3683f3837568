"""Booking domain models."""

from __future__ import annotations

import builtins
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Booking(models.Model):
    """A tenant's claim on a property for a date range."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    TERMINAL_STATUSES = (Status.REJECTED, Status.CANCELLED, Status.COMPLETED)
    CANCELLABLE_STATUSES = (Status.PENDING, Status.APPROVED)

    tenant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    message = models.CharField(max_length=500, blank=True)
    rejection_reason = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="booking_end_after_start",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "status"]),
            models.Index(fields=["tenant", "status"]),
            models.Index(fields=["status", "start_date", "end_date"]),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} for property {self.property_id} ({self.status})"

    @builtins.property
    def is_pending(self) -> bool:
        return self.status == self.Status.PENDING

    @builtins.property
    def is_approved(self) -> bool:
        return self.status == self.Status.APPROVED


class LeaveRequest(models.Model):
    """A tenant's request to end an approved booking early."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")

    class Condition(models.TextChoices):
        IMMEDIATE = "immediate", _("Immediately")
        END_OF_MONTH = "end_of_month", _("At the end of this month")
        END_OF_CURRENT_BOOKING = "end_of_current_booking", _("At the end of the booking")
        END_OF_NEXT_MONTH = "end_of_next_month", _("At the end of next month")

    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name="leave_requests",
    )
    tenant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="leave_requests",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_leave_requests",
    )
    message = models.CharField(max_length=1000, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    condition = models.CharField(
        max_length=32,
        choices=Condition.choices,
        null=True,
        blank=True,
        help_text=_("Set by the owner when approving."),
    )
    decision_note = models.CharField(max_length=1000, blank=True)
    effective_end_date = models.DateTimeField(null=True, blank=True)
    decided_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Leave request")
        verbose_name_plural = _("Leave requests")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["booking"],
                condition=models.Q(status="pending"),
                name="one_pending_leave_request_per_booking",
            ),
        ]

    def __str__(self) -> str:
        return f"Leave request #{self.pk} for booking {self.booking_id} ({self.status})"

    @property
    def is_pending(self) -> bool:
        return self.status == self.Status.PENDING
