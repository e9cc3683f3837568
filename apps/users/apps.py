"""App configuration for users."""

from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class UsersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.users"
    verbose_name = "Users"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .application import command_handlers

        command_handlers.register(message_bus)
