"""Application services.

Orchestration units; concrete IO lives in app/infra/.
"""

from app.services.event_forwarder import EventForwarder, ForwardResult
from app.services.team_registry import TeamRegistry

__all__ = [
    "EventForwarder",
    "ForwardResult",
    "TeamRegistry",
]
