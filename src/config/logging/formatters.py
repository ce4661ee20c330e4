"""JSON formatter with the mandatory field set."""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Build the formatter used by configure_logging.

    Output example::

        {"asctime": "2026-10-18 12:00:00,000", "level": "INFO",
         "logger": "app.services.event_forwarder",
         "message": "slack_event_forwarded", "correlation_id": "c0ffee",
         "service": "deep_signal_platform", "domain": "acme.ds.jgiebz.com"}
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)
