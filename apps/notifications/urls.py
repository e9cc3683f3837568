"""Notification routes.

List and delete the caller's notifications and toggle their read state,
one at a time (``<id>/mark_read/``) or all at once (``mark_all_read/``).
"""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import NotificationViewSet

router = DefaultRouter()
router.register(r"", NotificationViewSet, basename="notification")

urlpatterns = [
    path("", include(router.urls)),
]
