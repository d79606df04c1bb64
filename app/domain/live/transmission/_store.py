"""Transmission and playlist persistence."""

from datetime import datetime
from typing import Protocol

from beanie.odm.operators.update.general import Set
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.schemas import Playlist, Transmission, TransmissionStatus
from app.utils.app_errors import AppErrorCode, OperationError

from .transmission_models import PlaylistRecord, TransmissionRecord


class TransmissionStore(Protocol):
    async def get_playlist(self, playlist_id: int, owner_id: int) -> PlaylistRecord | None: ...

    async def get_active(self, owner_id: int) -> TransmissionRecord | None: ...

    async def finalize_active(self, owner_id: int, ended_at: datetime) -> TransmissionRecord | None:
        """Move the owner's ATIVA row (if any) to FINALIZADA and return it."""
        ...

    async def create(self, record: TransmissionRecord) -> TransmissionRecord:
        """Insert an ATIVA row. Raises OperationError if the owner already has one."""
        ...

    async def finalize(self, transmission_id: str, ended_at: datetime) -> bool:
        """Finalize one row if still ATIVA. Returns whether a row changed."""
        ...


def _to_record(doc: Transmission) -> TransmissionRecord:
    return TransmissionRecord.model_validate(doc.model_dump(exclude={"id", "revision_id"}))


def _persistence_error(action: str, exc: PyMongoError) -> OperationError:
    return OperationError(
        errcode=AppErrorCode.E_PERSISTENCE_FAILED,
        errmesg=f"Failed to {action}",
        error=str(exc),
    )


class BeanieTransmissionStore:
    """TransmissionStore backed by the `transmissoes` and `playlists` collections.

    The `owner_id_active_unique` partial index rejects a second ATIVA row for
    the same owner even if two writers get past the per-owner lock.
    """

    async def get_playlist(self, playlist_id: int, owner_id: int) -> PlaylistRecord | None:
        try:
            doc = await Playlist.find_one(
                Playlist.playlist_id == playlist_id,
                Playlist.owner_id == owner_id,
            )
        except PyMongoError as e:
            raise _persistence_error("load playlist", e) from e
        if doc is None:
            return None
        return PlaylistRecord(playlist_id=doc.playlist_id, owner_id=doc.owner_id, name=doc.name)

    async def get_active(self, owner_id: int) -> TransmissionRecord | None:
        try:
            doc = await Transmission.find_one(
                Transmission.owner_id == owner_id,
                Transmission.status == TransmissionStatus.ATIVA,
            )
        except PyMongoError as e:
            raise _persistence_error("load active transmission", e) from e
        return _to_record(doc) if doc else None

    async def finalize_active(self, owner_id: int, ended_at: datetime) -> TransmissionRecord | None:
        try:
            doc = await Transmission.find_one(
                Transmission.owner_id == owner_id,
                Transmission.status == TransmissionStatus.ATIVA,
            )
            if doc is None:
                return None

            result = await Transmission.find(
                Transmission.transmission_id == doc.transmission_id,
                Transmission.status == TransmissionStatus.ATIVA,
            ).update(Set({Transmission.status: TransmissionStatus.FINALIZADA, Transmission.ended_at: ended_at}))
        except PyMongoError as e:
            raise _persistence_error("finalize active transmission", e) from e

        if not result or result.modified_count == 0:
            # Finalized concurrently by a stop call
            return None

        doc.status = TransmissionStatus.FINALIZADA
        doc.ended_at = ended_at
        return _to_record(doc)

    async def create(self, record: TransmissionRecord) -> TransmissionRecord:
        doc = Transmission(**record.model_dump())
        try:
            await doc.insert()
        except DuplicateKeyError as e:
            raise OperationError(
                errmesg="Owner already has an active transmission",
                error=str(e),
                details={"owner_id": record.owner_id},
            ) from e
        except PyMongoError as e:
            raise _persistence_error("create transmission", e) from e
        return _to_record(doc)

    async def finalize(self, transmission_id: str, ended_at: datetime) -> bool:
        try:
            result = await Transmission.find(
                Transmission.transmission_id == transmission_id,
                Transmission.status == TransmissionStatus.ATIVA,
            ).update(Set({Transmission.status: TransmissionStatus.FINALIZADA, Transmission.ended_at: ended_at}))
        except PyMongoError as e:
            raise _persistence_error("finalize transmission", e) from e
        return bool(result and result.modified_count > 0)
