"""Streaming entity domain models."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas import StreamingStatus


class StreamingEntityRecord(BaseModel):
    login: str
    owner_id: int
    server_id: int
    status: StreamingStatus


class StreamingEntityView(StreamingEntityRecord):
    """Entity joined with its server, as listed to the owner."""

    server_name: str | None = Field(default=None, serialization_alias="servidor_nome")
    server_status: str | None = Field(default=None, serialization_alias="servidor_status")


class TransitionResult(BaseModel):
    """Outcome of one lifecycle operation.

    `alreadyActive` / `alreadyInactive` mark an idempotent no-op: success, but
    nothing was changed.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str | None = None
    status: StreamingStatus | None = None
    already_active: bool | None = Field(default=None, serialization_alias="alreadyActive")
    already_inactive: bool | None = Field(default=None, serialization_alias="alreadyInactive")
