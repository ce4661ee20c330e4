"""Parsing and authentication of inbound Slack events (no payload logging)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..signature import (
    DEFAULT_TOLERANCE_SECONDS,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    verify_slack_signature,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

URL_VERIFICATION = "url_verification"


class WebhookRequestError(ValueError):
    """Base error for rejected webhook requests."""


class InvalidSignatureError(WebhookRequestError):
    """Signature missing, stale or wrong."""


class InvalidJsonError(WebhookRequestError):
    """Body is not a JSON object."""


@dataclass(frozen=True, slots=True)
class SlackRequestHeaders:
    """Slack signature headers, propagated unchanged to the instance."""

    signature: str
    timestamp: str

    def as_dict(self) -> dict[str, str]:
        return {SIGNATURE_HEADER: self.signature, TIMESTAMP_HEADER: self.timestamp}


def parse_event_body(raw_body: bytes) -> dict[str, Any]:
    """Decode the body as a JSON object.

    Raises:
        InvalidJsonError: If the body is not valid JSON or not an object
    """
    try:
        payload = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")
    return payload


def is_url_verification(payload: Mapping[str, Any]) -> bool:
    """True for Slack's one-time URL verification handshake."""
    return payload.get("type") == URL_VERIFICATION


def authenticate_event(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
    *,
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    now: float | None = None,
) -> SlackRequestHeaders:
    """Verify the request signature.

    Args:
        raw_body: Exact request body
        headers: Request headers (case-insensitive mapping or lowercase keys)
        secret: Signing secret

    Raises:
        InvalidSignatureError: If verification fails

    Returns:
        The signature headers to forward downstream
    """
    signature = headers.get(SIGNATURE_HEADER) or ""
    timestamp = headers.get(TIMESTAMP_HEADER) or ""
    if not verify_slack_signature(
        raw_body,
        signature,
        timestamp,
        secret,
        now=now,
        tolerance_seconds=tolerance_seconds,
    ):
        raise InvalidSignatureError("invalid_signature")
    return SlackRequestHeaders(signature=signature, timestamp=timestamp)


def extract_team_id(payload: Mapping[str, Any]) -> str | None:
    """Team id from ``team_id``, else ``team.id``; first non-empty string wins."""
    team = payload.get("team")
    candidates = (
        payload.get("team_id"),
        team.get("id") if isinstance(team, dict) else None,
    )
    for candidate in candidates:
        if isinstance(candidate, str) and candidate:
            return candidate
    return None
