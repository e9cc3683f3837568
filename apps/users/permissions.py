"""Permission classes for the users API."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsPlatformAdmin(permissions.BasePermission):
    """Only platform administrators (role ``admin``, staff or superusers)."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        return hasattr(user, "is_platform_admin") and user.is_platform_admin()


class IsSelfOrPlatformAdmin(permissions.BasePermission):
    """Users may act on their own record; admins on anyone's."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj) -> bool:  # type: ignore
        user = request.user
        if hasattr(user, "is_platform_admin") and user.is_platform_admin():
            return True
        return obj.pk == user.pk
