"""Shared pytest fixtures."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from django.utils import timezone


@pytest.fixture
def freeze_now(monkeypatch):
    """Pin ``timezone.now()`` to a fixed moment."""

    def _freeze(moment: datetime) -> datetime:
        monkeypatch.setattr(timezone, "now", lambda: moment)
        return moment

    return _freeze


@pytest.fixture
def make_user(db):
    from apps.users.models import User

    def _make(email: str, role: str = User.RoleChoices.TENANT, **extra):
        extra.setdefault("username", email.split("@")[0].title())
        return User.objects.create_user(email=email, password="StrongPass123", role=role, **extra)

    return _make


@pytest.fixture
def owner(make_user):
    from apps.users.models import User

    return make_user("owner@example.com", User.RoleChoices.OWNER)


@pytest.fixture
def tenant(make_user):
    return make_user("tenant@example.com")


@pytest.fixture
def platform_admin(make_user):
    from apps.users.models import User

    return make_user("admin@example.com", User.RoleChoices.ADMIN)


@pytest.fixture
def prop(owner):
    from apps.properties.models import Property

    return Property.objects.create(
        owner=owner,
        title="Garden flat",
        location="Riverside",
        price=Decimal("100.00"),
    )


@pytest.fixture
def make_booking(tenant, prop):
    """Insert a booking directly, bypassing the lifecycle handlers."""
    from apps.bookings.models import Booking

    def _make(start: datetime, end: datetime, status: str = Booking.Status.APPROVED, **extra):
        extra.setdefault("tenant", tenant)
        extra.setdefault("property", prop)
        return Booking.objects.create(
            start_date=start,
            end_date=end,
            status=status,
            total_amount=Decimal("0.00"),
            **extra,
        )

    return _make
