"""Availability reconciliation for properties."""

from __future__ import annotations

import logging

from django.utils import timezone  # type: ignore

from shared.infrastructure.locking import lock_if_possible

from .models import Property

logger = logging.getLogger(__name__)


def reconcile_property_availability(property_id: int, *, now=None) -> str:
    """Recompute ``availability_status`` from the property's bookings.

    A property is ``Booked`` while it has an approved booking that has not
    ended yet. Otherwise it returns to ``Available`` unless the owner took
    it off the market (``Not Available``). Must be called inside the
    unit of work of the booking change so the property row lock covers
    sibling bookings changing concurrently.
    """

    from apps.bookings.models import Booking  # local import to avoid circular dependency

    now = now or timezone.now()
    prop = lock_if_possible(Property.objects.filter(pk=property_id)).first()
    if prop is None:
        return ""

    has_active_booking = Booking.objects.filter(
        property_id=property_id,
        status=Booking.Status.APPROVED,
        end_date__gt=now,
    ).exists()

    if has_active_booking:
        target = Property.AvailabilityStatus.BOOKED
    elif prop.availability_status == Property.AvailabilityStatus.NOT_AVAILABLE:
        target = prop.availability_status
    else:
        target = Property.AvailabilityStatus.AVAILABLE

    if prop.availability_status != target:
        logger.info(
            f"Property {prop.pk} availability {prop.availability_status} -> {target}"
        )
        prop.availability_status = target
        prop.save(update_fields=["availability_status", "updated_at"])
    return target
