from __future__ import annotations

from django.core.management.base import BaseCommand  # type: ignore

from apps.finances.tasks import run_due_reminder_sweep


class Command(BaseCommand):
    help = "Sends rent due reminders for the previous month"

    def handle(self, *args, **options):  # type: ignore
        summary = run_due_reminder_sweep()
        if summary["skipped"]:
            self.stdout.write(f"Skipped {summary['period']}: {summary['skipped']}")
            return
        self.stdout.write(
            self.style.SUCCESS(
                f"{summary['period']}: reminded {summary['reminded']} of {summary['checked']} bookings"
            )
        )
