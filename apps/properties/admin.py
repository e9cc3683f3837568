"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "location",
        "price",
        "availability_status",
        "is_active",
        "owner",
    )
    list_filter = ("availability_status", "is_active")
    search_fields = ("title", "location", "owner__email")
    readonly_fields = ("created_at", "updated_at")
