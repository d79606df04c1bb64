"""Transmission sessions: single active transmission per owner."""

from loguru import logger

from app.app_config import AppEnvironConfig, get_app_environ_config
from app.domain.live.streaming._store import StreamingStore
from app.domain.utils.clock import utc_now
from app.domain.utils.idgen import new_transmission_id
from app.schemas import TransmissionStatus, TransmissionType
from app.services.integrations.manifest_service import ManifestService
from app.utils.app_errors import AppErrorCode, NotFoundError, ValidationError

from ._owner_lock import OwnerLock
from ._player_urls import build_player_urls
from ._store import TransmissionStore
from .transmission_models import (
    TransmissionRecord,
    TransmissionStartParams,
    TransmissionStartResult,
    TransmissionStopResult,
)


def default_caller_login(owner_id: int) -> str:
    return f"user_{owner_id}"


class TransmissionSessionManager:
    """Starts and stops transmissions.

    `start` finalizes the owner's active transmission and creates the new one
    while holding the owner's lock, so concurrent starts for the same owner
    are serialized and never both see an empty slot. The manifest refresh
    runs after the lock is released and is best-effort: its failure is
    reported in `warnings` and never undoes the handoff.
    """

    def __init__(
        self,
        store: TransmissionStore,
        streaming_store: StreamingStore,
        manifest: ManifestService,
        owner_lock: OwnerLock,
        app_config: AppEnvironConfig | None = None,
    ):
        self._store = store
        self._streaming_store = streaming_store
        self._manifest = manifest
        self._owner_lock = owner_lock
        self._app_config = app_config or get_app_environ_config()

    async def start(self, params: TransmissionStartParams) -> TransmissionStartResult:
        # 0 is not a playlist id
        if not params.playlist_id:
            raise ValidationError(errmesg="playlist_id is required")

        playlist = await self._store.get_playlist(params.playlist_id, params.owner_id)
        if playlist is None:
            raise NotFoundError(
                errcode=AppErrorCode.E_PLAYLIST_NOT_FOUND,
                errmesg="Playlist not found",
                details={"playlist_id": params.playlist_id},
            )

        caller_login = params.caller_login or default_caller_login(params.owner_id)

        async with self._owner_lock.hold(params.owner_id):
            now = utc_now()
            finalized = await self._store.finalize_active(params.owner_id, ended_at=now)
            if finalized:
                logger.info(
                    "Transmission {} finalized by new start for owner {}",
                    finalized.transmission_id,
                    params.owner_id,
                )

            created = await self._store.create(
                TransmissionRecord(
                    transmission_id=new_transmission_id(),
                    owner_id=params.owner_id,
                    title=params.title,
                    description=params.description,
                    playlist_id=params.playlist_id,
                    type=TransmissionType.PLAYLIST,
                    status=TransmissionStatus.ATIVA,
                    platform_ids=params.platform_ids,
                    enable_recording=params.enable_recording,
                    use_smil=params.use_smil,
                    loop_playlist=params.loop_playlist,
                    started_at=now,
                )
            )

        logger.info(
            "Transmission {} started: owner={} playlist={}",
            created.transmission_id,
            params.owner_id,
            params.playlist_id,
        )

        warnings = []
        warning = await self._refresh_manifest(params.owner_id, caller_login)
        if warning:
            warnings.append(warning)

        return TransmissionStartResult(
            transmission_id=created.transmission_id,
            player_urls=build_player_urls(caller_login, params.playlist_id, self._app_config),
            warnings=warnings,
            finalized_transmission_id=finalized.transmission_id if finalized else None,
        )

    async def stop(self, transmission_id: str | int | None) -> TransmissionStopResult:
        # No ownership check on stop: any caller may finalize any transmission id
        if not transmission_id or not str(transmission_id).strip():
            raise ValidationError(errmesg="transmission_id is required")

        transmission_id = str(transmission_id).strip()
        finalized = await self._store.finalize(transmission_id, ended_at=utc_now())
        if finalized:
            logger.info("Transmission {} finalized", transmission_id)
        else:
            logger.info("Stop on transmission {} matched no active row", transmission_id)
        return TransmissionStopResult(finalized=finalized)

    async def _refresh_manifest(self, owner_id: int, login: str) -> str | None:
        try:
            server_id = await self._streaming_store.get_server_id_for_owner(owner_id)
            await self._manifest.update_user_manifest(
                owner_id=owner_id,
                login=login,
                server_id=server_id or self._app_config.DEFAULT_SERVER_ID,
            )
        except Exception as e:
            logger.warning("SMIL manifest refresh failed for owner {}: {!r}", owner_id, e)
            return f"Manifest refresh failed: {e}"
        return None
