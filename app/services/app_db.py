"""Database client helpers for application services."""

from motor.motor_asyncio import AsyncIOMotorClient

from app.shared.storage.mongo import get_mongo_client

# MongoDB label for the streaming control plane
STREAM_MONGO_LABEL = "stream_primary"


def get_stream_mongo_client() -> AsyncIOMotorClient:
    """Get MongoDB client for the streaming database.

    The connection string must name the database (`.../streaming`).
    """
    return get_mongo_client(STREAM_MONGO_LABEL)
