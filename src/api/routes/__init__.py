"""HTTP routes.

- routes/slack/: Slack events, registry diagnostics, OAuth callback
- routes/health/: liveness and readiness
- router.py: aggregates every router
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
