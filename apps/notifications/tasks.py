"""Celery tasks for notification delivery."""

from __future__ import annotations

import logging
from typing import Any, Optional

from celery import shared_task  # type: ignore

from .services import create_in_app_notification

logger = logging.getLogger(__name__)


@shared_task(name="notifications.deliver_notification")
def deliver_notification(
    user_id: int,
    title: str,
    message: str,
    link: str = "",
    metadata: Optional[dict[str, Any]] = None,
    property_id: Optional[int] = None,
) -> Optional[int]:
    """Persist one notification; returns its id or None when it was dropped."""
    try:
        notification = create_in_app_notification(
            user_id,
            title,
            message,
            link=link,
            metadata=metadata,
            property_id=property_id,
        )
    except Exception as e:
        logger.error(f"Failed to deliver notification '{title}' to user {user_id}: {e}", exc_info=True)
        return None
    return notification.pk if notification else None
