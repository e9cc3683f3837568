"""
Common Value Objects

Value objects used across multiple domains:
- Actor: Identity and role of the caller, supplied by the auth layer
- DateRange: Occupancy window between two aware datetimes
- BillingPeriod: One calendar month of the rent ledger
"""

import calendar
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from django.utils import timezone

from shared.domain.base import ValueObject

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class Actor(ValueObject):
    """
    Caller identity

    The core trusts this completely; it is built from the authenticated
    request user by the HTTP layer or explicitly by tasks and tests.
    """
    user_id: int
    role: str

    TENANT = 'tenant'
    OWNER = 'owner'
    ADMIN = 'admin'

    @classmethod
    def from_user(cls, user) -> 'Actor':
        role = getattr(user, 'role', cls.TENANT)
        if getattr(user, 'is_staff', False) or getattr(user, 'is_superuser', False):
            role = cls.ADMIN
        return cls(user_id=user.pk, role=role)

    @property
    def is_admin(self) -> bool:
        return self.role == self.ADMIN

    @property
    def is_tenant(self) -> bool:
        return self.role == self.TENANT

    @property
    def is_owner(self) -> bool:
        return self.role == self.OWNER


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents an occupancy window from start (inclusive) to end.
    Both bounds are aware datetimes and end is strictly after start.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start}) must be before end ({self.end})")

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Closed-interval overlap, matching how monthly periods are queried."""
        return self.start <= end and self.end >= start

    @property
    def billable_days(self) -> int:
        """Whole days charged for the window, rounded up, never below one."""
        return max(math.ceil((self.end - self.start) / ONE_DAY), 1)

    def __str__(self):
        return f"{self.start:%d.%m.%Y} - {self.end:%d.%m.%Y}"


def end_of_month(moment: datetime, months_ahead: int = 0) -> datetime:
    """Last instant (23:59:59.999) of the month ``months_ahead`` after ``moment``."""
    local = timezone.localtime(moment)
    month_index = local.month - 1 + months_ahead
    year = local.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return local.replace(
        year=year, month=month, day=last_day,
        hour=23, minute=59, second=59, microsecond=999000,
    )


@dataclass(frozen=True)
class BillingPeriod(ValueObject):
    """
    One calendar month of the rent ledger

    Bounds are computed in the current Django time zone.
    """
    month: int
    year: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {self.month}")

    @classmethod
    def previous(cls, now: datetime) -> 'BillingPeriod':
        local = timezone.localtime(now)
        if local.month == 1:
            return cls(month=12, year=local.year - 1)
        return cls(month=local.month - 1, year=local.year)

    @property
    def start(self) -> datetime:
        return timezone.make_aware(datetime(self.year, self.month, 1))

    @property
    def end(self) -> datetime:
        return end_of_month(self.start)

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def __str__(self):
        return f"{self.year}-{self.month:02d}"
