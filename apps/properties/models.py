"""Property domain models.

Only the part of a listing the tenancy lifecycle depends on lives here:
the owner, the monthly price and the availability flag kept in sync
with approved bookings. Search, photos and profile data belong to the
listing service.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Property(models.Model):
    """A rentable property with a monthly price."""

    class AvailabilityStatus(models.TextChoices):
        AVAILABLE = "Available", _("Available")
        BOOKED = "Booked", _("Booked")
        NOT_AVAILABLE = "Not Available", _("Not available")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Monthly rent, also charged per day for short bookings."),
    )
    availability_status = models.CharField(
        max_length=20,
        choices=AvailabilityStatus.choices,
        default=AvailabilityStatus.AVAILABLE,
        help_text=_("Derived from approved bookings; reconciled after each booking change."),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner", "availability_status"]),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def is_available(self) -> bool:
        return self.availability_status == self.AvailabilityStatus.AVAILABLE
