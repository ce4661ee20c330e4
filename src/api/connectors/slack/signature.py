"""Slack request signature verification (v0 scheme).

Slack signs ``v0:{timestamp}:{raw body}`` with HMAC-SHA256 using the app's
signing secret and sends ``v0=<hex>`` in X-Slack-Signature.

Reference: https://api.slack.com/authentication/verifying-requests-from-slack
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time

logger = logging.getLogger(__name__)

SIGNATURE_VERSION = "v0"
SIGNATURE_HEADER = "x-slack-signature"
TIMESTAMP_HEADER = "x-slack-request-timestamp"
DEFAULT_TOLERANCE_SECONDS = 300


def compute_slack_signature(raw_body: bytes, timestamp: str, secret: str) -> str:
    """Return ``v0=<hex digest>`` for the given body and timestamp."""
    base_string = f"{SIGNATURE_VERSION}:{timestamp}:".encode() + raw_body
    digest = hmac.new(secret.encode("utf-8"), base_string, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_slack_signature(
    raw_body: bytes,
    signature: str | None,
    timestamp: str | None,
    secret: str | None,
    *,
    now: float | None = None,
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
) -> bool:
    """Check authenticity and freshness of a Slack request.

    Args:
        raw_body: Exact request body bytes, before any parsing
        signature: X-Slack-Signature value
        timestamp: X-Slack-Request-Timestamp value (unix seconds)
        secret: Signing secret; verification fails closed when empty
        now: Current unix time (defaults to time.time())
        tolerance_seconds: Replay window

    Returns:
        True only if the timestamp is fresh and the signature matches.
    """
    if not secret:
        logger.warning("slack_signature_rejected", extra={"reason": "missing_signing_secret"})
        return False
    if not signature or not timestamp:
        logger.warning("slack_signature_rejected", extra={"reason": "missing_headers"})
        return False

    try:
        request_time = int(timestamp)
    except ValueError:
        logger.warning("slack_signature_rejected", extra={"reason": "invalid_timestamp"})
        return False

    current_time = time.time() if now is None else now
    if abs(current_time - request_time) > tolerance_seconds:
        logger.warning(
            "slack_signature_rejected",
            extra={"reason": "stale_timestamp", "skew_seconds": int(current_time - request_time)},
        )
        return False

    expected = compute_slack_signature(raw_body, timestamp, secret)
    try:
        valid = hmac.compare_digest(expected, signature)
    except (TypeError, ValueError):
        # compare_digest rejects non-ASCII str input
        valid = False

    if not valid:
        logger.warning("slack_signature_rejected", extra={"reason": "signature_mismatch"})
    return valid
