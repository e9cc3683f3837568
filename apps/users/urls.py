"""User routes.

- ``/``            list users (admins only)
- ``/<id>/``       profile and removal of one user
- ``/me/``         the caller's profile
- ``/account/``    DELETE removes the caller's own account
"""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import UserViewSet

router = DefaultRouter()
router.register(r"", UserViewSet, basename="user")

urlpatterns = [
    path("", include(router.urls)),
]
