"""Admin registration for notifications."""

from __future__ import annotations

from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("title", "user", "property", "is_read", "created_at")
    list_filter = ("is_read",)
    search_fields = ("title", "user__email")
    readonly_fields = ("created_at",)
