"""
Unit of Work

Every lifecycle command runs inside one ``DjangoUnitOfWork``: the row
locks, the writes, the availability reconciliation and the events it
records either all commit together or not at all.
"""

from typing import List
import logging

from django.db import DatabaseError, transaction

from shared.domain.base import DomainEvent
from shared.domain.exceptions import StorageError

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    ``transaction.atomic()`` plus an outbox of domain events

    Usage:
        with DjangoUnitOfWork() as uow:
            booking = load_booking_for_update(booking_id)
            booking.status = Booking.Status.CANCELLED
            booking.save(update_fields=["status", "updated_at"])
            uow.add_event(BookingCancelled(...))
        # subscribers run once the outermost transaction has committed

    Recorded events are dropped when the block raises. Database failures
    surface as ``StorageError``.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._atomic = None

    def __enter__(self):
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self._schedule_publish()
            else:
                self._discard()
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)

        if exc_type is not None and issubclass(exc_type, DatabaseError):
            logger.error(f"Storage failure, transaction rolled back: {exc_val}", exc_info=True)
            raise StorageError(str(exc_val)) from exc_val
        return False

    def add_event(self, event: DomainEvent):
        self._events.append(event)
        logger.debug(f"Recorded {event.__class__.__name__} (aggregate {event.aggregate_id})")

    def _schedule_publish(self):
        events, self._events = self._events, []
        if events:
            transaction.on_commit(lambda: self._publish(events))

    def _discard(self):
        if self._events:
            logger.warning(f"Rolling back, discarding {len(self._events)} events")
        self._events = []

    def _publish(self, events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        try:
            message_bus.publish_events(events)
        except Exception as e:
            # Already committed; a lost notification is only logged.
            logger.error(f"Error publishing events: {e}", exc_info=True)
