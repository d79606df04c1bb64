"""Read-side status views."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.domain.live.streaming.streaming_models import StreamingEntityView


class TransmissionStats(BaseModel):
    """Viewer statistics placeholder; real metrics are not collected here."""

    model_config = ConfigDict(populate_by_name=True)

    viewers: int = 0
    bitrate: int = 0
    uptime: str = "00:00:00"
    is_active: bool = Field(default=True, serialization_alias="isActive")


class ActiveTransmissionView(BaseModel):
    id: str
    titulo: str | None = None
    codigo_playlist: int | None = None
    stats: TransmissionStats = Field(default_factory=TransmissionStats)
    platforms: list[dict] = Field(default_factory=list)


class TransmissionStatusView(BaseModel):
    is_live: bool = False
    stream_type: Literal["playlist", "obs"] | None = None
    transmission: ActiveTransmissionView | None = None


class StreamingListView(BaseModel):
    success: bool = True
    streamings: list[StreamingEntityView] = Field(default_factory=list)
