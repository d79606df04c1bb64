"""Composite read views over streaming entities and transmissions."""

from typing import Any

from loguru import logger

from app.domain.live.streaming._store import StreamingStore
from app.domain.live.streaming.streaming_domain import require_login
from app.domain.live.transmission._store import TransmissionStore
from app.services.integrations.streaming_control_service import StreamingControlService
from app.utils.app_errors import AppError, InternalError

from .status_models import ActiveTransmissionView, StreamingListView, TransmissionStatusView


class StatusAggregator:
    """Read-only; nothing here mutates entities or transmissions."""

    def __init__(
        self,
        streaming_store: StreamingStore,
        transmission_store: TransmissionStore,
        control: StreamingControlService,
    ):
        self._streaming_store = streaming_store
        self._transmission_store = transmission_store
        self._control = control

    async def load_global_config(self) -> dict[str, Any] | None:
        return await self._streaming_store.get_global_config()

    async def entity_status(self, login: str | None, global_config: dict[str, Any] | None = None) -> dict[str, Any]:
        """Live status report of the control service, always wrapped as success.

        A probe that answers with a failure is returned inside the report; only
        a probe that raises becomes an InternalError.
        """
        login = require_login(login)
        try:
            report = await self._control.verificar_status(login, global_config)
        except AppError:
            raise
        except Exception as e:
            logger.error("Status probe failed for {}: {!r}", login, e)
            raise InternalError(errmesg="Internal error while checking streaming status", error=str(e)) from e

        report = dict(report or {})
        report.pop("success", None)
        return {"success": True, **report}

    async def transmission_status(self, owner_id: int) -> TransmissionStatusView:
        active = await self._transmission_store.get_active(owner_id)
        if active is None:
            return TransmissionStatusView()

        return TransmissionStatusView(
            is_live=True,
            stream_type="playlist" if active.playlist_id is not None else "obs",
            transmission=ActiveTransmissionView(
                id=active.transmission_id,
                titulo=active.title,
                codigo_playlist=active.playlist_id,
            ),
        )

    async def list_entities(self, owner_id: int) -> StreamingListView:
        streamings = await self._streaming_store.list_for_owner(owner_id)
        return StreamingListView(streamings=streamings)
