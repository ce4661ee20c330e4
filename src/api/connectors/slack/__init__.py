"""Slack connector: request signatures, event parsing, OAuth exchange."""

from .oauth_client import (
    SlackInstallation,
    SlackOAuthClient,
    SlackOAuthError,
    create_slack_oauth_client,
)
from .signature import compute_slack_signature, verify_slack_signature

__all__ = [
    "SlackInstallation",
    "SlackOAuthClient",
    "SlackOAuthError",
    "compute_slack_signature",
    "create_slack_oauth_client",
    "verify_slack_signature",
]
