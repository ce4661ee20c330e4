"""Metrics emitted as structured log records.

Records are aggregated downstream by the log pipeline; nothing is kept in
process.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Record the latency of one operation.

    Args:
        component: Component name (e.g. "event_forwarder")
        operation: Operation name (e.g. "forward")
        latency_ms: Elapsed milliseconds
        correlation_id: Request correlation id
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_forward_result(
    domain: str,
    success: bool,
    reason: str | None = None,
    correlation_id: str | None = None,
) -> None:
    """Count one relay attempt to an instance, tagged by outcome."""
    logger.info(
        "metric_forward_result",
        extra={
            "metric_type": "counter",
            "component": "event_forwarder",
            "domain": domain,
            "result": "success" if success else "failure",
            "reason": reason,
            "correlation_id": correlation_id,
        },
    )
