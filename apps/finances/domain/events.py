"""
Finance Domain Events

Published after the ledger change commits; the scheduler publishes
RentDueReminder directly since it only reads committed state.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class PaymentStatusChanged(DomainEvent):
    """
    Event: Tenant moved a ledger entry to paid/unpaid/advanced

    Triggers:
    - Notify tenant
    - Notify property owner
    """
    transaction_id: int
    booking_id: int
    property_id: int
    property_title: str
    tenant_id: int
    owner_id: int
    status: str
    booking_completed: bool = False


@dataclass(kw_only=True)
class MonthlyPaymentRecorded(DomainEvent):
    """
    Event: A (possibly partial) monthly payment was recorded

    Triggers:
    - Notify property owner
    """
    transaction_id: int
    booking_id: int
    property_id: int
    property_title: str
    owner_id: int
    tenant_name: str
    amount: Decimal
    total_paid: Decimal
    total_expected: Decimal
    month_name: str = ''


@dataclass(kw_only=True)
class RentDueReminder(DomainEvent):
    """
    Event: A booking still owes rent for a closed billing period

    Triggers:
    - Notify tenant ("Rent due reminder")
    - Notify owner ("Tenant due reminder")
    """
    booking_id: int
    property_id: int
    property_title: str
    tenant_id: int
    tenant_name: str
    owner_id: int
    month: int
    year: int
    period_label: str
    total_expected: Decimal
    total_paid: Decimal
    due: Decimal
    transaction_id: Optional[int] = None
