"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from shared.domain.base import DomainEvent


# ===== Booking Events =====

@dataclass(kw_only=True)
class BookingRequested(DomainEvent):
    """
    Event: A tenant requested a booking (-> PENDING)

    Triggers:
    - Notify property owner
    """
    booking_id: int
    property_id: int
    property_title: str
    owner_id: int
    tenant_id: int
    tenant_name: str
    start_date: datetime
    end_date: datetime


@dataclass(kw_only=True)
class BookingDecided(DomainEvent):
    """
    Event: Owner approved or rejected a booking (PENDING -> APPROVED/REJECTED)

    Triggers:
    - Notify tenant
    """
    booking_id: int
    property_id: int
    property_title: str
    tenant_id: int
    status: str
    rejection_reason: str = ''


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Event: Tenant cancelled a booking

    Triggers:
    - Notify property owner
    """
    booking_id: int
    property_id: int
    property_title: str
    owner_id: int
    tenant_name: str
    old_status: str


# ===== Leave Request Events =====

@dataclass(kw_only=True)
class LeaveRequested(DomainEvent):
    """
    Event: Tenant asked to leave an approved booking early

    Triggers:
    - Notify property owner
    """
    leave_request_id: int
    booking_id: int
    property_id: int
    property_title: str
    owner_id: int
    tenant_name: str


@dataclass(kw_only=True)
class LeaveRequestDecided(DomainEvent):
    """
    Event: Owner resolved a leave request (PENDING -> APPROVED/REJECTED)

    Triggers:
    - Notify tenant (with the effective end date when approved)
    """
    leave_request_id: int
    booking_id: int
    property_id: int
    tenant_id: int
    approved: bool
    note: str = ''
    condition: Optional[str] = None
    effective_end_date: Optional[datetime] = None
    booking_completed: bool = False
