"""Slack Events API endpoint.

Endpoints:
- GET /api/slack/events: liveness of the endpoint
- POST /api/slack/events: inbound events

POST flow:
1. Parse JSON (400 on failure)
2. url_verification: echo the challenge, no signature check
3. Verify the v0 signature (401 on failure)
4. Resolve team_id to an instance (200 with a warning when unknown)
5. Schedule the relay in the background and acknowledge immediately

Slack expects an answer within 3 seconds, so the relay is never awaited.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from api.connectors.slack.webhook import (
    InvalidJsonError,
    InvalidSignatureError,
    authenticate_event,
    extract_team_id,
    is_url_verification,
    parse_event_body,
)
from api.routes.slack.events_runtime_tasks import schedule_forwarding_task
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from config.settings import get_slack_settings

if TYPE_CHECKING:
    from app.services import EventForwarder, TeamRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/events")
async def events_status() -> dict[str, Any]:
    return {
        "status": "ok",
        "message": "Slack events endpoint",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.post("/events", response_model=None)
async def receive_event(request: Request) -> JSONResponse | dict[str, Any]:
    """Receive a Slack event and relay it to the owning instance."""
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        settings = get_slack_settings()
        raw_body = await request.body()

        try:
            payload = parse_event_body(raw_body)
        except InvalidJsonError as exc:
            logger.warning(
                "slack_event_json_invalid",
                extra={"correlation_id": get_correlation_id(), "error": str(exc)},
            )
            return JSONResponse(
                content={"error": "Invalid JSON"},
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        if is_url_verification(payload):
            logger.info("slack_url_verification", extra={"correlation_id": get_correlation_id()})
            return {"challenge": payload.get("challenge")}

        try:
            slack_headers = authenticate_event(
                raw_body,
                request.headers,
                settings.signing_secret or None,
                tolerance_seconds=settings.signature_tolerance_seconds,
            )
        except InvalidSignatureError:
            return JSONResponse(
                content={"error": "Invalid signature"},
                status_code=status.HTTP_401_UNAUTHORIZED,
            )

        team_id = extract_team_id(payload)
        if team_id is None:
            logger.warning(
                "slack_event_without_team",
                extra={
                    "correlation_id": get_correlation_id(),
                    "event_type": payload.get("type"),
                },
            )
            return {"ok": True, "warning": "No team_id"}

        registry: TeamRegistry = request.app.state.team_registry
        mapping = await registry.resolve(team_id)
        if mapping is None:
            logger.warning(
                "slack_event_unknown_team",
                extra={"correlation_id": get_correlation_id(), "team_id": team_id},
            )
            return {"ok": True, "warning": "Unknown team"}

        forwarder: EventForwarder = request.app.state.event_forwarder
        schedule_forwarding_task(
            correlation_id=get_correlation_id(),
            team_id=team_id,
            domain=mapping.domain,
            coroutine=forwarder.forward(mapping.domain, payload, slack_headers.as_dict()),
        )
        return {"ok": True}
    finally:
        reset_correlation_id(token)
