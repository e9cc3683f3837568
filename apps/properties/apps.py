"""App configuration for properties."""

from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class PropertiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.properties"
    verbose_name = "Properties"
