"""Row locking helpers for command handlers."""

from __future__ import annotations

from django.db import transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore


def lock_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic().

    Backends without row locks (SQLite) ignore the clause, so handlers can
    use the same code path in tests and production.
    """

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset
