import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from academy_client.config import Settings, get_settings


logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


async def connect_to_mongo(settings: Optional[Settings] = None) -> Optional[AsyncIOMotorDatabase]:
    global _client, _database
    settings = settings or get_settings()
    if not settings.mongo_url:
        return None
    if _database is not None:
        return _database
    _client = AsyncIOMotorClient(settings.mongo_url)
    _database = _client[settings.mongo_db_name]
    logger.info("connected to MongoDB database %s", settings.mongo_db_name)
    return _database


async def close_mongo_connection() -> None:
    global _client, _database
    if _client is not None:
        _client.close()
    _client = None
    _database = None


def get_database() -> Optional[AsyncIOMotorDatabase]:
    return _database
