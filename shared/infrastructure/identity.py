"""Bridges the authenticated request user into the domain ``Actor``."""

from __future__ import annotations

from shared.domain.value_objects import Actor


def actor_from_request(request) -> Actor:  # type: ignore
    """Build the caller identity for a command from ``request.user``."""
    return Actor.from_user(request.user)
