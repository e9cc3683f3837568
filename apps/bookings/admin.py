"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, LeaveRequest


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "property",
        "tenant",
        "status",
        "start_date",
        "end_date",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "start_date", "end_date")
    search_fields = ("property__title", "tenant__email")
    readonly_fields = ("created_at", "updated_at", "total_amount")


@admin.register(LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "booking", "tenant", "owner", "status", "condition", "effective_end_date")
    list_filter = ("status", "condition")
    search_fields = ("booking__property__title", "tenant__email", "owner__email")
    readonly_fields = ("created_at", "updated_at", "decided_at")
