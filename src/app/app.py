"""Deep Signal Platform entrypoint.

Initializes the bootstrap and exposes the ASGI application (FastAPI).

Usage (production):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Usage (development):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.connectors.config_service import create_config_service_client
from api.connectors.slack import create_slack_oauth_client
from api.routes import create_api_router
from api.routes.slack.events_runtime_tasks import (
    configure_forwarding_limit,
    drain_forwarding_tasks,
)
from app.bootstrap import SERVICE_NAME, initialize_app, validate_runtime_settings
from app.bootstrap.clients import create_async_redis_client, create_firestore_client
from app.bootstrap.dependencies import (
    create_event_forwarder,
    create_instance_inventory,
    create_team_mapping_store,
    create_team_registry,
)
from config.logging import get_logger
from config.settings import get_registry_settings, get_slack_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Logging must be configured before anything logs
initialize_app()

logger = get_logger(__name__)


async def _seed_firestore_health_doc(firestore_client: object) -> None:
    """Write the document read by the readiness probe."""

    def _write_doc() -> None:
        firestore_client.collection("_health").document("check").set(  # type: ignore[attr-defined]
            {
                "updated_at": datetime.now(UTC).isoformat(),
                "service": SERVICE_NAME,
            }
        )

    await asyncio.to_thread(_write_doc)


async def _connect_backends(app: FastAPI) -> None:
    """Create only the client the configured mapping backend needs."""
    backend = get_registry_settings().backend
    app.state.redis_client = None
    app.state.firestore_client = None

    if backend == "redis":
        try:
            app.state.redis_client = create_async_redis_client()
        except Exception as exc:
            logger.warning("redis_client_not_ready", extra={"error_type": type(exc).__name__})

    if backend == "firestore":
        try:
            app.state.firestore_client = create_firestore_client()
            await _seed_firestore_health_doc(app.state.firestore_client)
        except Exception as exc:
            logger.warning("firestore_client_not_ready", extra={"error_type": type(exc).__name__})


async def _close_redis(app: FastAPI) -> None:
    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is None:
        return
    close_async = getattr(redis_client, "aclose", None)
    close_sync = getattr(redis_client, "close", None)
    if callable(close_async):
        await close_async()
    elif callable(close_sync):
        await close_sync()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifecycle.

    Startup:
    - Validate settings
    - Build the registry, forwarder and OAuth collaborators into app.state
    - Warm the registry cache when PRELOAD_ON_STARTUP is set

    Shutdown:
    - Drain (then cancel) in-flight relays
    - Close connections
    """
    logger.info("app_starting", extra={"service": SERVICE_NAME})
    validate_runtime_settings()
    slack_settings = get_slack_settings()

    await _connect_backends(app)
    store = create_team_mapping_store(
        redis_client=app.state.redis_client,
        firestore_client=app.state.firestore_client,
    )
    app.state.team_registry = create_team_registry(store, create_instance_inventory())
    app.state.event_forwarder = create_event_forwarder()
    app.state.slack_oauth_client = create_slack_oauth_client(slack_settings)
    app.state.config_service_client = create_config_service_client(slack_settings)
    configure_forwarding_limit(slack_settings.max_concurrent_forwards)

    if get_registry_settings().preload_on_startup:
        count = await app.state.team_registry.preload()
        logger.info("team_registry_preloaded_on_startup", extra={"preloaded": count})

    yield

    logger.info("app_shutting_down", extra={"service": SERVICE_NAME})
    await drain_forwarding_tasks(timeout_seconds=slack_settings.shutdown_grace_seconds)
    await _close_redis(app)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    fastapi_app = FastAPI(
        title="Deep Signal Platform",
        description="Slack event relay for Deep Signal instances",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": SERVICE_NAME})

    return fastapi_app


# ASGI application for uvicorn
app = create_app()


def main() -> None:
    """Run the development server."""
    import uvicorn

    logger.info("Starting Deep Signal Platform in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
