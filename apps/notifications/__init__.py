"""Notifications app package.

Receives domain events after their transaction commits and delivers
in-app notifications through a Celery task, so a delivery failure never
affects the operation that triggered it.
"""
