"""DRF exception handler rendering domain errors."""

from __future__ import annotations

import logging

from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import DomainError, StorageError

logger = logging.getLogger(__name__)


def domain_exception_handler(exc, context):  # type: ignore
    """Map ``DomainError`` subclasses to ``{"detail", "code"}`` responses.

    Everything else falls through to the stock DRF handler.
    """

    if isinstance(exc, DomainError):
        view = context.get("view")
        if isinstance(exc, StorageError):
            logger.error(f"Storage error in {view.__class__.__name__}: {exc.message}")
        payload = {"detail": exc.message, "code": exc.code}
        if exc.details:
            payload.update(exc.details)
        return Response(payload, status=exc.status_code)

    return drf_exception_handler(exc, context)
