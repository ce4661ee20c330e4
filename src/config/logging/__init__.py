"""Structured JSON logging.

Usage:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="deep_signal_platform")

    logger = get_logger(__name__)
    logger.info("slack_event_forwarded", extra={"domain": "acme.ds.jgiebz.com"})

Every record carries correlation_id, service, level, logger, message and
asctime. Secrets (bot tokens, signing secrets) are masked before formatting.
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import CorrelationIdFilter, SecretRedactionFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "SecretRedactionFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
]
