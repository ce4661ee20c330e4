"""Hetzner Cloud inventory adapter."""

from app.infra.hetzner.inventory_client import (
    HetznerInventoryClient,
    create_hetzner_inventory_client,
)

__all__ = [
    "HetznerInventoryClient",
    "create_hetzner_inventory_client",
]
