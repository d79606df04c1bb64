"""HTTP client for the streaming control service (encoder process control)."""

from typing import Any, Protocol
from urllib.parse import quote

import httpx
from loguru import logger

from app.app_config import get_app_environ_config

from .streaming_control_schemas import ControlActionBody, ControlResult, StatusProbeBody


class StreamingControlService(Protocol):
    """Black-box capability acting on the streaming process identified by login."""

    async def ligar(self, login: str) -> ControlResult: ...

    async def desligar(self, login: str) -> ControlResult: ...

    async def reiniciar(self, login: str) -> ControlResult: ...

    async def bloquear(self, login: str, caller_role: str) -> ControlResult: ...

    async def desbloquear(self, login: str, caller_role: str) -> ControlResult: ...

    async def remover(self, login: str, caller_role: str) -> ControlResult: ...

    async def verificar_status(
        self, login: str, global_config: dict[str, Any] | None = None
    ) -> dict[str, Any]: ...


class StreamingControlClient:
    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _build_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        return headers

    def _url(self, login: str, action: str) -> str:
        return f"{self.base_url}/streamings/{quote(login, safe='')}/{action}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _post_action(self, login: str, action: str, body: ControlActionBody) -> ControlResult:
        async with self._client() as client:
            response = await client.post(
                self._url(login, action),
                json=body.model_dump(exclude_none=True),
                headers=self._build_headers(),
            )

        # The service reports rejections (including "already") in a JSON envelope
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and "success" in data:
            result = ControlResult.model_validate(data)
            logger.debug("{} {} -> status={} body={}", action, login, response.status_code, data)
            return result

        response.raise_for_status()
        return ControlResult(success=True)

    async def ligar(self, login: str) -> ControlResult:
        return await self._post_action(login, "ligar", ControlActionBody())

    async def desligar(self, login: str) -> ControlResult:
        return await self._post_action(login, "desligar", ControlActionBody())

    async def reiniciar(self, login: str) -> ControlResult:
        return await self._post_action(login, "reiniciar", ControlActionBody())

    async def bloquear(self, login: str, caller_role: str) -> ControlResult:
        return await self._post_action(login, "bloquear", ControlActionBody(caller_role=caller_role))

    async def desbloquear(self, login: str, caller_role: str) -> ControlResult:
        return await self._post_action(login, "desbloquear", ControlActionBody(caller_role=caller_role))

    async def remover(self, login: str, caller_role: str) -> ControlResult:
        return await self._post_action(login, "remover", ControlActionBody(caller_role=caller_role))

    async def verificar_status(
        self, login: str, global_config: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Probe the live process status. The report is returned as-is."""
        async with self._client() as client:
            response = await client.post(
                self._url(login, "status"),
                json=StatusProbeBody(config=global_config).model_dump(mode="json"),
                headers=self._build_headers(),
            )

        # A failed status check is still a report, whatever the HTTP status
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            logger.debug("status {} -> status={} body={}", login, response.status_code, data)
            return data

        response.raise_for_status()
        raise httpx.DecodingError(f"Unexpected status report for {login}: {response.text[:200]!r}")


def build_streaming_control_client() -> StreamingControlClient:
    app_config = get_app_environ_config()
    return StreamingControlClient(
        base_url=app_config.STREAMING_CONTROL_BASE_URL,
        api_key=app_config.STREAMING_CONTROL_API_KEY,
        timeout=app_config.STREAMING_CONTROL_TIMEOUT_SECONDS,
    )
