"""Beanie initialization for ODM."""

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.schemas.global_config import GlobalConfig
from app.schemas.streaming import Server, StreamingEntity
from app.schemas.transmission import Playlist, Transmission
from app.utils.app_errors import ValidationError

DOCUMENT_MODELS = [
    GlobalConfig,
    Playlist,
    Server,
    StreamingEntity,
    Transmission,
]


async def init_beanie_odm(
    mongo_client: AsyncIOMotorClient | AsyncIOMotorDatabase,
    database_name: str | None = None,
) -> None:
    """
    Initialize Beanie ODM with all document models.

    Args:
        mongo_client: Motor client or database instance
        database_name: Database name (only needed if passing client)
    """
    if isinstance(mongo_client, AsyncIOMotorClient):
        if not database_name:
            raise ValidationError(errmesg="database_name required when passing AsyncIOMotorClient")
        database = mongo_client[database_name]
    else:
        database = mongo_client

    await init_beanie(
        database=database,  # type: ignore[arg-type]
        document_models=DOCUMENT_MODELS,
    )


__all__ = ["DOCUMENT_MODELS", "init_beanie_odm"]
