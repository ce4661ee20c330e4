"""Slack Events API webhook: parsing, handshake detection, authentication."""

from .receive import (
    URL_VERIFICATION,
    InvalidJsonError,
    InvalidSignatureError,
    SlackRequestHeaders,
    WebhookRequestError,
    authenticate_event,
    extract_team_id,
    is_url_verification,
    parse_event_body,
)

__all__ = [
    "URL_VERIFICATION",
    "InvalidJsonError",
    "InvalidSignatureError",
    "SlackRequestHeaders",
    "WebhookRequestError",
    "authenticate_event",
    "extract_team_id",
    "is_url_verification",
    "parse_event_body",
]
