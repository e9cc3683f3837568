"""
User Command Handlers

Commands:
- DeleteUserCommand: The user themself or an admin removes an account
- DeleteAccountCommand: Self-service removal of the caller's own account

Both run the role-keyed deletion plan in a single transaction; a failing
step rolls back the whole plan and surfaces as StorageError.
"""

from dataclasses import dataclass
from typing import Dict
import logging

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import Forbidden, NotFound
from shared.domain.value_objects import Actor
from shared.infrastructure.locking import lock_if_possible
from apps.bookings.models import Booking
from apps.properties.services import reconcile_property_availability
from apps.users.cascade import build_cascade_plan, execute_cascade_plan
from apps.users.models import User

logger = logging.getLogger(__name__)


@dataclass
class DeleteUserCommand:
    actor: Actor
    user_id: int


@dataclass
class DeleteAccountCommand:
    actor: Actor


def _delete_with_plan(user_id: int, *, self_service: bool) -> Dict[str, int]:
    with DjangoUnitOfWork():
        user = lock_if_possible(User.objects.filter(pk=user_id)).first()
        if user is None:
            raise NotFound("User not found")

        # Properties that lose one of this user's bookings but survive the cascade
        touched_properties = set(
            Booking.objects.filter(tenant_id=user.pk)
            .exclude(property__owner_id=user.pk)
            .values_list("property_id", flat=True)
        )

        counts = execute_cascade_plan(build_cascade_plan(user, self_service=self_service))

        for property_id in touched_properties:
            reconcile_property_availability(property_id)

    logger.info(f"User {user_id} deleted (self_service={self_service}): {counts}")
    return counts


class DeleteUserHandler:
    def handle(self, command: DeleteUserCommand) -> Dict[str, int]:
        actor = command.actor
        if not (actor.is_admin or actor.user_id == command.user_id):
            raise Forbidden("Access denied")
        return _delete_with_plan(command.user_id, self_service=False)


class DeleteAccountHandler:
    def handle(self, command: DeleteAccountCommand) -> Dict[str, int]:
        return _delete_with_plan(command.actor.user_id, self_service=True)


def register(bus) -> None:
    bus.register_command_handlers({
        DeleteUserCommand: DeleteUserHandler(),
        DeleteAccountCommand: DeleteAccountHandler(),
    })
