"""Account deletion cascade.

Deleting a user touches records in every app. Instead of relying on
implicit ``on_delete`` chains the deletion is described as an ordered
plan of ``(model, filter)`` steps built from the user's role, and the
plan is executed inside the caller's transaction. Dependents always come
before the rows they reference.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Type

from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeletionStep:
    model: Type[models.Model]
    condition: Q
    label: str


def build_cascade_plan(user, *, self_service: bool = False) -> List[DeletionStep]:
    """Ordered deletion steps for ``user``.

    - ratings given or received by the user always go first
    - owners lose everything hanging off their properties, then the
      properties themselves
    - self-service deletion also removes the user's own bookings (with
      their ledger and leave requests) and authored reviews
    - notifications addressed to the user go before the user row
    """

    from apps.bookings.models import Booking, LeaveRequest
    from apps.finances.models import Transaction
    from apps.notifications.models import Notification
    from apps.properties.models import Property
    from apps.reviews.models import Review, UserRating
    from apps.users.models import User

    plan: List[DeletionStep] = [
        DeletionStep(UserRating, Q(rater_id=user.pk) | Q(ratee_id=user.pk), "ratings"),
    ]

    if user.is_owner():
        owned = Q(property__owner_id=user.pk)
        plan += [
            DeletionStep(Transaction, owned, "owned property transactions"),
            DeletionStep(LeaveRequest, Q(booking__property__owner_id=user.pk), "owned property leave requests"),
            DeletionStep(Booking, owned, "owned property bookings"),
            DeletionStep(Review, owned, "owned property reviews"),
            DeletionStep(Notification, owned, "owned property notifications"),
            DeletionStep(Property, Q(owner_id=user.pk), "properties"),
        ]

    if self_service:
        plan += [
            DeletionStep(Transaction, Q(booking__tenant_id=user.pk), "booking transactions"),
            DeletionStep(LeaveRequest, Q(booking__tenant_id=user.pk), "booking leave requests"),
            DeletionStep(Booking, Q(tenant_id=user.pk), "bookings"),
            DeletionStep(Review, Q(author_id=user.pk), "authored reviews"),
        ]

    plan += [
        DeletionStep(Notification, Q(user_id=user.pk), "notifications"),
        DeletionStep(User, Q(pk=user.pk), "user"),
    ]
    return plan


def _delete_step(step: DeletionStep) -> int:
    deleted, _ = step.model._default_manager.filter(step.condition).delete()
    return deleted


def execute_cascade_plan(plan: List[DeletionStep]) -> Dict[str, int]:
    """Run every step in order; must be called inside a transaction."""

    counts: Dict[str, int] = {}
    for step in plan:
        counts[step.label] = _delete_step(step)
        logger.debug(f"Cascade step '{step.label}' removed {counts[step.label]} rows")
    return counts
