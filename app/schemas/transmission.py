"""Transmission and playlist ODM schemas."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import IndexModel

from .schema_utils import as_utc_datetime
from .streaming_state import TransmissionStatus, TransmissionType


class Playlist(Document):
    """Playlist owned by a platform user."""

    playlist_id: Indexed(int, unique=True)  # type: ignore[valid-type]
    owner_id: Indexed(int)  # type: ignore[valid-type]
    name: str | None = None

    class Settings:
        name = "playlists"


class Transmission(Document):
    """One broadcast session. At most one ATIVA row per owner."""

    transmission_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    owner_id: int

    title: str | None = None
    description: str = ""
    playlist_id: int | None = None
    type: TransmissionType = TransmissionType.PLAYLIST

    status: TransmissionStatus = TransmissionStatus.ATIVA

    # Start options, persisted as requested
    platform_ids: list[int] = Field(default_factory=list)
    enable_recording: bool = False
    use_smil: bool = False
    loop_playlist: bool = False

    started_at: datetime
    ended_at: datetime | None = None

    @field_validator("started_at", "ended_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        """Stored timestamps come back as UTC-aware datetimes."""
        return as_utc_datetime(v)

    class Settings:
        name = "transmissoes"
        indexes = [
            IndexModel(
                [("owner_id", 1)],
                partialFilterExpression={"status": TransmissionStatus.ATIVA.value},
                unique=True,
                name="owner_id_active_unique",
            ),
            IndexModel(
                [("owner_id", 1), ("started_at", -1)],
                name="owner_id_started_at",
            ),
        ]
