"""Bootstrap - initialization and wiring.

Composition root: configures logging, validates settings and connects
concrete implementations to the protocols.

Usage:
    from app.bootstrap import initialize_app, validate_runtime_settings

    initialize_app()
    validate_runtime_settings()
"""

from __future__ import annotations

import logging
import os

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_firestore_settings,
    get_hetzner_settings,
    get_registry_settings,
    get_slack_settings,
)

# Service name for logs and metrics
SERVICE_NAME = "deep_signal_platform"

DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configure JSON logging with correlation ids. Call once per process."""
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def collect_settings_errors() -> list[str]:
    """Aggregate validation errors of every settings group, prefixed by group."""
    base = get_base_settings()
    registry = get_registry_settings()
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"slack: {error}" for error in get_slack_settings().validate())
    errors.extend(f"hetzner: {error}" for error in get_hetzner_settings().validate())
    errors.extend(f"registry: {error}" for error in registry.validate(base))

    if registry.backend == "firestore":
        firestore_errors = get_firestore_settings().validate(base.gcp_project)
        errors.extend(f"firestore: {error}" for error in firestore_errors)

    return errors


def validate_runtime_settings() -> None:
    """Validate required settings at startup.

    In staging/production an invalid configuration aborts the boot. In
    development the errors are only logged.
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Invalid configuration for {environment}:\n{details}")
