"""Global configuration ODM schema."""

from beanie import Document
from pydantic import ConfigDict


class GlobalConfig(Document):
    """Platform-wide settings row; fields are owned by the admin panel."""

    model_config = ConfigDict(extra="allow")

    class Settings:
        name = "configuracoes"
