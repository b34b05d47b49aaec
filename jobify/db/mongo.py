# jobify/db/mongo.py
import logging
from typing import Optional

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from jobify.core.config import settings
from jobify.db.documents import DOCUMENT_MODELS

logger = logging.getLogger(__name__)

_mongo_client: Optional[AsyncIOMotorClient] = None


def get_mongo_client() -> AsyncIOMotorClient:
    """
    Returns a cached Motor client.
    """
    global _mongo_client
    if _mongo_client is None:
        _mongo_client = AsyncIOMotorClient(settings.MONGODB_URI)
    return _mongo_client


def get_db():
    client = get_mongo_client()
    return client[settings.MONGODB_DB]


async def init_db(database=None) -> None:
    """Register the Beanie documents. `database` lets tests pass a mock db."""
    if database is None:
        database = get_db()
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
    logger.info("Beanie initialised on database '%s'", database.name)


def close_db() -> None:
    global _mongo_client
    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None
        logger.info("MongoDB client closed")
