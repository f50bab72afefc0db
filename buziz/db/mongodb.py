"""
MongoDB connection management.
"""
import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from buziz.core.config import settings

logger = logging.getLogger(__name__)


class MongoDB:
    """
    MongoDB connection manager.
    Provides access to database and collections with connection management.
    """

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

    @classmethod
    def connect_to_mongodb(cls):
        """
        Create the client if not already created.
        Motor connects lazily, so this never blocks or fails on an
        unreachable server; the first operation does.
        """
        if cls.client is None:
            logger.info(f"Connecting to MongoDB at {settings.MONGODB_URL} (database: {settings.MONGODB_DB})")

            cls.client = AsyncIOMotorClient(
                settings.MONGODB_URL,
                serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
            )
            cls.db = cls.client[settings.MONGODB_DB]

    @classmethod
    async def close_mongodb_connection(cls):
        """
        Close MongoDB connection if open.
        """
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("Closed MongoDB connection")

    @classmethod
    def get_database(cls) -> AsyncIOMotorDatabase:
        """
        Get database instance.

        Returns:
            AsyncIOMotorDatabase instance
        """
        if cls.db is None:
            cls.connect_to_mongodb()
        return cls.db

    @classmethod
    def get_collection(cls, collection_name: str) -> AsyncIOMotorCollection:
        """
        Get collection by name.

        Args:
            collection_name: Name of collection

        Returns:
            AsyncIOMotorCollection instance
        """
        return cls.get_database()[collection_name]


mongodb = MongoDB()


def get_kv_collection() -> AsyncIOMotorCollection:
    return mongodb.get_collection(settings.MONGODB_KV_COLLECTION)
