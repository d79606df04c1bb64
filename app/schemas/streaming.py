"""Streaming entity and server ODM schemas."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import field_validator

from .schema_utils import as_utc_datetime
from .streaming_state import StreamingStatus


class StreamingEntity(Document):
    """Login-identified egress channel, provisioned out-of-band."""

    login: Indexed(str, unique=True)  # type: ignore[valid-type]
    owner_id: Indexed(int)  # type: ignore[valid-type]
    server_id: int

    status: StreamingStatus = StreamingStatus.INATIVO

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        """Stored timestamps come back as UTC-aware datetimes."""
        return as_utc_datetime(v)

    class Settings:
        name = "streamings"
        indexes = [
            [("owner_id", 1), ("login", 1)],
        ]


class Server(Document):
    """Streaming server a streaming entity runs on."""

    server_id: Indexed(int, unique=True)  # type: ignore[valid-type]
    name: str
    status: str | None = None

    class Settings:
        name = "servidores"
