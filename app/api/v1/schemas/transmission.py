from pydantic import BaseModel, Field, field_validator


class TransmissionStartIn(BaseModel):
    titulo: str | None = None
    descricao: str = ""
    playlist_id: int | None = None
    platform_ids: list[int] = Field(default_factory=list)
    enable_recording: bool = False
    use_smil: bool = False
    loop_playlist: bool = False

    @field_validator("descricao", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return "" if v is None else v

    @field_validator("platform_ids", mode="before")
    @classmethod
    def _none_as_empty_list(cls, v):
        return [] if v is None else v


class TransmissionStopIn(BaseModel):
    transmission_id: str | int | None = None
    # Accepted for compatibility with existing clients; not used
    stream_type: str | None = None
