"""Slack router - events, diagnostics and the OAuth callback."""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.slack.events import router as events_router
from api.routes.slack.oauth import router as oauth_router
from api.routes.slack.status import router as status_router

router = APIRouter()

router.include_router(events_router)
router.include_router(status_router)
router.include_router(oauth_router)
