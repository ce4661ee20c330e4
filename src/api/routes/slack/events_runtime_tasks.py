"""Background task control for relaying Slack events to instances."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from app.services.event_forwarder import ForwardResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT_FORWARDS = 100

_TASK_SEMAPHORE = asyncio.Semaphore(DEFAULT_MAX_CONCURRENT_FORWARDS)
_active_tasks: set[asyncio.Task[Any]] = set()


def configure_forwarding_limit(max_concurrent: int) -> None:
    """Replace the concurrency limit. Call at startup, before any task runs."""
    global _TASK_SEMAPHORE
    _TASK_SEMAPHORE = asyncio.Semaphore(max(1, max_concurrent))


def active_task_count() -> int:
    return len(_active_tasks)


def schedule_forwarding_task(
    *,
    correlation_id: str,
    team_id: str,
    domain: str,
    coroutine: Awaitable[ForwardResult],
) -> asyncio.Task[Any]:
    """Schedule a relay without awaiting it; the caller acknowledges at once."""
    task = asyncio.create_task(
        _run_with_limit(
            coroutine,
            correlation_id=correlation_id,
            team_id=team_id,
            domain=domain,
        )
    )
    _active_tasks.add(task)
    task.add_done_callback(_on_forwarding_task_done)
    logger.info(
        "slack_event_forward_scheduled",
        extra={
            "correlation_id": correlation_id,
            "team_id": team_id,
            "domain": domain,
            "active_tasks": len(_active_tasks),
        },
    )
    return task


async def _run_with_limit(
    coroutine: Awaitable[ForwardResult],
    *,
    correlation_id: str,
    team_id: str,
    domain: str,
) -> None:
    async with _TASK_SEMAPHORE:
        result = await coroutine
    if not result.success:
        logger.warning(
            "slack_event_forward_failed",
            extra={
                "correlation_id": correlation_id,
                "team_id": team_id,
                "domain": domain,
                "error": result.error,
            },
        )


def _on_forwarding_task_done(task: asyncio.Task[Any]) -> None:
    _active_tasks.discard(task)
    with contextlib.suppress(asyncio.CancelledError):
        exc = task.exception()
        if exc is not None:
            logger.error(
                "slack_event_forward_task_failed",
                extra={
                    "error_type": type(exc).__name__,
                    "active_tasks": len(_active_tasks),
                },
            )


async def drain_forwarding_tasks(timeout_seconds: float = 0.0) -> None:
    """Wait up to ``timeout_seconds`` for pending relays, then cancel the rest.

    Relaying is best-effort: events still in flight when the grace period ends
    are dropped.
    """
    if not _active_tasks:
        return

    pending_now = list(_active_tasks)
    logger.info(
        "slack_event_forward_shutdown_wait",
        extra={
            "pending_tasks": len(pending_now),
            "timeout_seconds": timeout_seconds,
        },
    )
    if timeout_seconds > 0:
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
    else:
        pending = {task for task in pending_now if not task.done()}
    if not pending:
        return

    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
    logger.warning(
        "slack_event_forward_shutdown_cancelled",
        extra={"cancelled_tasks": len(pending)},
    )
