"""Admin registration for the rent ledger."""

from __future__ import annotations

from django.contrib import admin

from .models import ReminderRun, Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = (
        "reference",
        "booking",
        "tenant",
        "property",
        "month_name",
        "year",
        "total_expected",
        "total_paid",
        "status",
    )
    list_filter = ("status", "payment_method", "year", "month")
    search_fields = ("reference", "tenant__email", "property__title")
    readonly_fields = ("reference", "created_at", "updated_at")


@admin.register(ReminderRun)
class ReminderRunAdmin(admin.ModelAdmin):
    list_display = ("year", "month", "last_run_at", "reminders_sent")
    ordering = ("-year", "-month")
