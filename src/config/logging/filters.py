"""Logging filters that enrich or sanitise records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

REDACTED = "[redacted]"

# Attribute names passed through `extra` that must never reach the output
SENSITIVE_FIELDS = frozenset(
    {
        "bot_token",
        "access_token",
        "client_secret",
        "signing_secret",
        "authorization",
        "api_token",
    }
)


class CorrelationIdFilter(logging.Filter):
    """Adds ``correlation_id`` and ``service`` to every record.

    A correlation id passed explicitly through ``extra`` wins over the one
    returned by the getter.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SecretRedactionFilter(logging.Filter):
    """Masks known secret attributes on the record. Never drops a record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name in SENSITIVE_FIELDS:
            if getattr(record, name, None):
                setattr(record, name, REDACTED)
        return True
