"""App configuration for reviews."""

from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class ReviewsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.reviews"
    verbose_name = "Reviews"
