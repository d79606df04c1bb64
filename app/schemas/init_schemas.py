from app.schemas.init import init_beanie_odm
from app.services.app_db import get_stream_mongo_client


async def init_schema():
    mongo_client = get_stream_mongo_client()
    db = mongo_client.get_default_database()
    await init_beanie_odm(db)


if __name__ == "__main__":
    import asyncio

    asyncio.run(init_schema())
