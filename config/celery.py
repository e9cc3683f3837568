"""Celery application for the tenancy lifecycle.

Workers run notification delivery; beat runs the rent due reminder
sweep. Task settings are read from Django settings under ``CELERY_``.
"""

import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("tenancy")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Rent due reminders for the previous month - every 12 hours
    "send-due-reminders": {
        "task": "finances.send_due_reminders",
        "schedule": crontab(minute=0, hour="*/12"),
        "options": {"expires": 60 * 60},
    },
}
