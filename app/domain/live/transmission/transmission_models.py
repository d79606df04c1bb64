"""Transmission domain models."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas import TransmissionStatus, TransmissionType


class PlaylistRecord(BaseModel):
    playlist_id: int
    owner_id: int
    name: str | None = None


class TransmissionRecord(BaseModel):
    """Transmission row as seen by the domain layer."""

    transmission_id: str
    owner_id: int

    title: str | None = None
    description: str = ""
    playlist_id: int | None = None
    type: TransmissionType = TransmissionType.PLAYLIST
    status: TransmissionStatus = TransmissionStatus.ATIVA

    platform_ids: list[int] = Field(default_factory=list)
    enable_recording: bool = False
    use_smil: bool = False
    loop_playlist: bool = False

    started_at: datetime
    ended_at: datetime | None = None


class TransmissionStartParams(BaseModel):
    """Input of `TransmissionSessionManager.start`."""

    owner_id: int
    playlist_id: int | None = None
    title: str | None = None
    description: str = ""
    caller_login: str | None = None

    # Start options, persisted on the row
    platform_ids: list[int] = Field(default_factory=list)
    enable_recording: bool = False
    use_smil: bool = False
    loop_playlist: bool = False


class PlayerUrls(BaseModel):
    iframe: str
    direct: str


class TransmissionStartResult(BaseModel):
    success: bool = True
    transmission_id: str
    message: str = "Transmission started"
    player_urls: PlayerUrls
    # Soft failures (manifest refresh) that did not abort the start
    warnings: list[str] = Field(default_factory=list)
    finalized_transmission_id: str | None = None


class TransmissionStopResult(BaseModel):
    success: bool = True
    message: str = "Transmission finalized"
    # False when no ATIVA row matched (already finalized or unknown id)
    finalized: bool = False
