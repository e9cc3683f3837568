"""
Base Domain Classes

- ValueObject: immutable, compared by value
- DomainEvent: a committed state change, carried to subscribers
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from django.utils import timezone


@dataclass(frozen=True)
class ValueObject(ABC):
    pass


@dataclass(kw_only=True)
class DomainEvent:
    """
    Something that happened to a booking, leave request or ledger entry

    Events carry plain ids and display values so subscribers never need
    to reload rows that may already be gone.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=timezone.now)
    aggregate_id: Optional[int] = None
