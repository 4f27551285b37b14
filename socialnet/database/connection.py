import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from starlette.requests import HTTPConnection

from socialnet.config import Settings


logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None


async def connect_to_mongo(settings: Settings) -> AsyncIOMotorDatabase:
    global _client
    _client = AsyncIOMotorClient(
        settings.MONGO_URL,
        serverSelectionTimeoutMS=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
    )
    logger.info("Connected to MongoDB database %s", settings.MONGO_DB)
    return _client[settings.MONGO_DB]


async def close_mongo_connection() -> None:
    global _client
    if _client is not None:
        _client.close()
        logger.info("MongoDB connection closed")
    _client = None


def mongo_db_dependency(conn: HTTPConnection) -> AsyncIOMotorDatabase:
    # The app holds the database it was started with (real or injected).
    return conn.app.state.db
