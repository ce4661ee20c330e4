"""Shared async HTTP client for outbound calls (httpx).

Retries 429/5xx responses and connection errors with exponential backoff.
Any other httpx failure is raised as HttpError without a retry.
Responses below 500 other than 429 are returned to the caller as-is.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """HTTP client configuration.

    ``transport`` replaces the network layer (httpx.MockTransport in tests).
    """

    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 2.0
    backoff_max_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True
    transport: httpx.AsyncBaseTransport | None = None


class HttpError(Exception):
    """HTTP failure without request data (no headers, no tokens)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


class HttpClient:
    """Thin retrying wrapper over httpx.AsyncClient."""

    def __init__(self, config: HttpClientConfig | None = None) -> None:
        self._config = config or HttpClientConfig()

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            verify=self._config.verify_ssl,
            timeout=self._config.timeout_seconds,
            transport=self._config.transport,
        )

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        data: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        merged_headers = {**self._config.default_headers, **(headers or {})}
        for attempt in range(self._config.max_retries + 1):
            try:
                async with self._client() as client:
                    response = await client.request(
                        method,
                        url,
                        json=json,
                        data=data,
                        params=params,
                        headers=merged_headers,
                    )
                if response.status_code == 429 or response.status_code >= 500:
                    raise HttpError(
                        "http_retryable_status",
                        status_code=response.status_code,
                        is_retryable=True,
                    )
                return response
            except HttpError as exc:
                if not exc.is_retryable or attempt >= self._config.max_retries:
                    raise
                await _backoff_sleep(
                    attempt,
                    self._config.backoff_base_seconds,
                    self._config.backoff_max_seconds,
                )
            except (httpx.TimeoutException, httpx.ConnectError) as exc:
                if attempt >= self._config.max_retries:
                    raise HttpError("http_connection_error", is_retryable=True) from exc
                await _backoff_sleep(
                    attempt,
                    self._config.backoff_base_seconds,
                    self._config.backoff_max_seconds,
                )
            except httpx.HTTPError as exc:
                raise HttpError("http_transport_error") from exc
        raise HttpError("http_retry_exhausted", is_retryable=True)

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("GET", url, params=params, headers=headers)

    async def post(
        self,
        url: str,
        json: Any = None,
        headers: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("POST", url, json=json, data=data, headers=headers)

    async def put(
        self,
        url: str,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("PUT", url, json=json, headers=headers)


async def _backoff_sleep(attempt: int, base: float, max_seconds: float) -> None:
    backoff = min((2**attempt) * base, max_seconds)
    logger.info("http_backoff", extra={"backoff_seconds": backoff, "attempt": attempt})
    await asyncio.sleep(backoff)
