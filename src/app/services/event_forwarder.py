"""Event forwarder - relays a verified Slack event to an instance.

The Slack signature headers are passed through so the instance can verify
the event itself. Every outcome is returned as a ForwardResult; ``forward``
never raises, since it runs detached from the request that triggered it.
No retries.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from app.observability import get_correlation_id, record_forward_result, record_latency

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

FORWARDED_FROM = "deep-signal-platform"
TIMEOUT_ERROR = "Timeout"

SIGNATURE_HEADER = "x-slack-signature"
TIMESTAMP_HEADER = "x-slack-request-timestamp"


@dataclass(frozen=True, slots=True)
class ForwardResult:
    """Outcome of one relay attempt."""

    success: bool
    error: str | None = None


class EventForwarder:
    """POSTs events to ``https://{domain}{path}`` within a hard timeout.

    Args:
        timeout_seconds: Upper bound on the whole request
        path: Path on the instance receiving events
        transport: Optional httpx transport (tests)
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 5.0,
        path: str = "/slack/events",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._path = path
        self._transport = transport

    def target_url(self, domain: str) -> str:
        return f"https://{domain}{self._path}"

    async def forward(
        self,
        domain: str,
        event: Any,
        headers: Mapping[str, str],
    ) -> ForwardResult:
        """Relay ``event`` to the instance at ``domain``.

        Args:
            domain: Instance FQDN
            event: JSON-serialisable Slack payload
            headers: Inbound headers; only the Slack signature and timestamp
                are propagated

        Returns:
            ForwardResult; error is "Timeout", "Instance returned <status>"
            or the transport error message.
        """
        url = self.target_url(domain)
        started_at = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._post(url, event, self._outbound_headers(headers)),
                timeout=self._timeout,
            )
        except (TimeoutError, httpx.TimeoutException):
            result = ForwardResult(success=False, error=TIMEOUT_ERROR)
        except httpx.HTTPError as exc:
            result = ForwardResult(success=False, error=str(exc) or type(exc).__name__)
        except Exception as exc:
            # e.g. a payload httpx cannot encode
            result = ForwardResult(success=False, error=str(exc) or type(exc).__name__)
        else:
            if response.is_success:
                result = ForwardResult(success=True)
            else:
                result = ForwardResult(
                    success=False,
                    error=f"Instance returned {response.status_code}",
                )

        latency_ms = (time.perf_counter() - started_at) * 1000
        correlation_id = get_correlation_id()
        record_latency("event_forwarder", "forward", latency_ms, correlation_id)
        record_forward_result(domain, result.success, result.error, correlation_id)
        if result.success:
            logger.info("slack_event_forwarded", extra={"domain": domain})
        return result

    async def _post(
        self,
        url: str,
        event: Any,
        headers: dict[str, str],
    ) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            return await client.post(url, json=event, headers=headers)

    @staticmethod
    def _outbound_headers(headers: Mapping[str, str]) -> dict[str, str]:
        lowered = {key.lower(): value for key, value in headers.items()}
        return {
            "Content-Type": "application/json",
            "X-Forwarded-From": FORWARDED_FROM,
            "X-Slack-Request-Timestamp": lowered.get(TIMESTAMP_HEADER, ""),
            "X-Slack-Signature": lowered.get(SIGNATURE_HEADER, ""),
        }
