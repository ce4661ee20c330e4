"""Route aggregation - registers every router on the app.

Usage:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.health.router import router as health_router
from api.routes.slack.router import router as slack_router


def create_api_router() -> APIRouter:
    """Build the main router with every sub-router registered."""
    api_router = APIRouter()

    # /health and /ready at the root
    api_router.include_router(health_router, tags=["health"])

    api_router.include_router(
        slack_router,
        prefix="/api/slack",
        tags=["slack"],
    )

    return api_router
