"""Protocols - contracts between services and infrastructure."""

from app.protocols.instance_inventory import InstanceInventoryProtocol
from app.protocols.team_mapping_store import TeamMappingStoreProtocol

__all__ = [
    "InstanceInventoryProtocol",
    "TeamMappingStoreProtocol",
]
