from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ControlActionBody(BaseModel):
    caller_role: str | None = None


class StatusProbeBody(BaseModel):
    config: dict[str, Any] | None = None


class ControlResult(BaseModel):
    """Outcome reported by the streaming control service for one action.

    `alreadyActive` / `alreadyInactive` flag the idempotent no-op branch; the
    service reports them with `success=false`.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    success: bool = False
    message: str | None = None
    already_active: bool = Field(default=False, alias="alreadyActive")
    already_inactive: bool = Field(default=False, alias="alreadyInactive")
