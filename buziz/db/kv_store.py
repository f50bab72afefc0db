"""
Key-value repository over a MongoDB collection.
"""
import re
from typing import Any, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorCollection

from buziz.db.mongodb import get_kv_collection


class KVRepository:
    """
    Stores one JSON value per string key.
    Documents have the shape ``{"_id": key, "value": <json>}``.
    """

    def __init__(self, collection: Optional[AsyncIOMotorCollection] = None):
        """
        Initialize repository with MongoDB collection.

        Args:
            collection: Motor collection, defaults to the configured kv collection
        """
        self.collection = collection if collection is not None else get_kv_collection()

    async def ping(self) -> None:
        """
        Check the server is reachable.

        Raises:
            pymongo.errors.PyMongoError: If the server cannot be reached
        """
        await self.collection.database.command("ping")

    async def get(self, key: str) -> Optional[Any]:
        """
        Get the value stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored value or None if the key is absent
        """
        document = await self.collection.find_one({"_id": key})
        if document is None:
            return None
        return document.get("value")

    async def set(self, key: str, value: Any) -> None:
        """
        Store a value, replacing anything under the same key.

        Args:
            key: Storage key
            value: JSON-compatible value
        """
        await self.collection.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)

    async def delete(self, key: str) -> None:
        await self.collection.delete_one({"_id": key})

    async def find_by_prefix(self, prefix: str) -> List[Tuple[str, Any]]:
        """
        Find every key starting with a prefix.

        Args:
            prefix: Key prefix

        Returns:
            List of (key, value) pairs ordered by key
        """
        cursor = self.collection.find({"_id": {"$regex": f"^{re.escape(prefix)}"}}).sort("_id", 1)
        documents = await cursor.to_list(length=None)
        return [(doc["_id"], doc.get("value")) for doc in documents]
