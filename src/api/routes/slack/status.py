"""Diagnostic view of the team registry cache.

GET reads the cache only. POST triggers a preload first.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request

if TYPE_CHECKING:
    from app.services import TeamRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/status")
async def registry_status(request: Request) -> dict[str, Any]:
    registry: TeamRegistry = request.app.state.team_registry
    mappings = registry.list_cached()
    return {
        "status": "ok",
        "cachedInstances": len(mappings),
        "instances": [mapping.to_public_dict() for mapping in mappings],
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.post("/status")
async def preload_registry(request: Request) -> dict[str, Any]:
    """Warm the cache from the inventory and report its contents."""
    registry: TeamRegistry = request.app.state.team_registry
    count = await registry.preload()
    mappings = registry.list_cached()
    logger.info(
        "team_registry_preload_requested",
        extra={"preloaded": count, "cached_instances": len(mappings)},
    )
    return {
        "status": "ok",
        "preloaded": count,
        "cachedInstances": len(mappings),
        "instances": [mapping.to_public_dict(include_installed_at=False) for mapping in mappings],
        "timestamp": datetime.now(UTC).isoformat(),
    }
