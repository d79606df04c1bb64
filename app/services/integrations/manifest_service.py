"""HTTP client for the playback manifest (SMIL) service."""

from typing import Protocol

import httpx
from loguru import logger

from app.app_config import get_app_environ_config


class ManifestService(Protocol):
    async def update_user_manifest(self, owner_id: int, login: str, server_id: int) -> None: ...


class ManifestClient:
    """Regenerates the per-user SMIL manifest from the owner's active playlist."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def update_user_manifest(self, owner_id: int, login: str, server_id: int) -> None:
        headers = {"X-Api-Key": self.api_key} if self.api_key else {}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                f"{self.base_url}/manifests/{owner_id}/smil",
                json={"login": login, "server_id": server_id},
                headers=headers,
            )
            response.raise_for_status()

        logger.debug("SMIL manifest regenerated: owner_id={} login={} server_id={}", owner_id, login, server_id)


def build_manifest_client() -> ManifestClient:
    app_config = get_app_environ_config()
    return ManifestClient(
        base_url=app_config.MANIFEST_SERVICE_BASE_URL,
        api_key=app_config.MANIFEST_SERVICE_API_KEY,
        timeout=app_config.MANIFEST_SERVICE_TIMEOUT_SECONDS,
    )
