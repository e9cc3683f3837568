"""In-app notification services."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .models import Notification

logger = logging.getLogger(__name__)


def create_in_app_notification(
    user_id: int,
    title: str,
    message: str,
    *,
    link: str = "",
    metadata: Optional[dict[str, Any]] = None,
    property_id: Optional[int] = None,
) -> Optional[Notification]:
    """
    Persist an in-app notification.

    Returns None when the recipient no longer exists; notifications are a
    side channel and never fail the caller.
    """
    from apps.users.models import User

    if not User.objects.filter(pk=user_id).exists():
        logger.warning(f"Skipping notification '{title}': user {user_id} does not exist")
        return None

    if property_id is not None:
        from apps.properties.models import Property

        if not Property.objects.filter(pk=property_id).exists():
            property_id = None

    notification = Notification.objects.create(
        user_id=user_id,
        property_id=property_id,
        title=title,
        message=message,
        link=link,
        metadata=metadata or {},
    )
    logger.info(f"In-app notification created for user {user_id}: {title}")
    return notification


def set_read_state(user_id: int, *, is_read: bool, notification_id: Optional[int] = None) -> int:
    """Mark one (or every) notification of a user read or unread."""
    qs = Notification.objects.filter(user_id=user_id)
    if notification_id is not None:
        qs = qs.filter(pk=notification_id)
    else:
        qs = qs.filter(is_read=not is_read)
    return qs.update(is_read=is_read)
