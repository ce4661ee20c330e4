"""Hetzner Cloud inventory client.

Lists the servers provisioned by the platform and maintains the Slack labels
used as a persistent backup of team → instance routing.

API reference: https://docs.hetzner.cloud/#servers
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.domain.instance import TEAM_ID_LABEL, Instance
from app.infra.http import HttpClient, HttpClientConfig, HttpError
from app.protocols.instance_inventory import InstanceInventoryProtocol

if TYPE_CHECKING:
    import httpx

    from config.settings import HetznerSettings

logger = logging.getLogger(__name__)

_PAGE_SIZE = 50


class HetznerInventoryClient(HttpClient, InstanceInventoryProtocol):
    """Inventory backed by the Hetzner Cloud servers API."""

    def __init__(
        self,
        api_token: str,
        *,
        base_url: str,
        managed_label_selector: str,
        config: HttpClientConfig | None = None,
    ) -> None:
        if not api_token or not api_token.strip():
            raise ValueError("api_token is required for the Hetzner inventory")
        super().__init__(config)
        self._base_url = base_url.rstrip("/")
        self._managed_selector = managed_label_selector
        self._auth_headers = {"Authorization": f"Bearer {api_token}"}

    async def list_instances(self) -> list[Instance]:
        """Every server matching the managed-by selector, across all pages."""
        return await self._list_servers(self._managed_selector)

    async def find_by_team(self, team_id: str) -> Instance | None:
        servers = await self._list_servers(f"{TEAM_ID_LABEL}={team_id}", max_pages=1)
        return servers[0] if servers else None

    async def label_instance(self, instance_id: int, labels: dict[str, str]) -> None:
        """Merge ``labels`` into the server's current labels."""
        url = f"{self._base_url}/servers/{instance_id}"
        current = _json(await self.get(url, headers=self._auth_headers), url)
        merged = {**(current.get("server", {}).get("labels") or {}), **labels}
        response = await self.put(url, json={"labels": merged}, headers=self._auth_headers)
        _json(response, url)
        logger.info(
            "instance_labels_updated",
            extra={"instance_id": instance_id, "labels": sorted(labels)},
        )

    async def _list_servers(self, label_selector: str, max_pages: int | None = None) -> list[Instance]:
        url = f"{self._base_url}/servers"
        instances: list[Instance] = []
        page: int | None = 1
        pages_read = 0
        while page is not None:
            params = {"label_selector": label_selector, "page": page, "per_page": _PAGE_SIZE}
            data = _json(await self.get(url, params=params, headers=self._auth_headers), url)
            instances.extend(Instance.from_api(server) for server in data.get("servers") or [])
            pages_read += 1
            if max_pages is not None and pages_read >= max_pages:
                break
            page = ((data.get("meta") or {}).get("pagination") or {}).get("next_page")
        return instances


def _json(response: httpx.Response, url: str) -> dict[str, Any]:
    if not response.is_success:
        logger.warning(
            "hetzner_request_failed",
            extra={"url": url, "status_code": response.status_code},
        )
        raise HttpError("hetzner_request_failed", status_code=response.status_code)
    return response.json()


def create_hetzner_inventory_client(
    settings: HetznerSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HetznerInventoryClient | None:
    """Build the inventory client, or None when no API token is configured."""
    from config.settings import get_hetzner_settings

    hetzner = settings or get_hetzner_settings()
    if not hetzner.enabled:
        logger.warning("hetzner_inventory_disabled", extra={"reason": "missing_api_token"})
        return None
    config = HttpClientConfig(
        timeout_seconds=hetzner.request_timeout_seconds,
        max_retries=hetzner.max_retries,
        backoff_base_seconds=0.5,
        transport=transport,
    )
    return HetznerInventoryClient(
        hetzner.api_token,
        base_url=hetzner.api_base_url,
        managed_label_selector=hetzner.managed_label_selector,
        config=config,
    )
