"""
Base repository for office-scoped record collections.
"""
import uuid
from typing import Any, Dict, List, Optional, Tuple

from buziz.storage import keys
from buziz.storage.backends import StorageBackend


def new_id() -> str:
    return str(uuid.uuid4())


class BaseRepository:
    """
    Whole-collection access to ``office:{officeId}:{type}`` keys.
    Each collection carries a version counter that is bumped on every save.
    """

    def __init__(self, backend: StorageBackend):
        """
        Initialize repository with the backend serving this operation.

        Args:
            backend: Storage backend chosen by the data access layer
        """
        self.backend = backend

    async def get_collection(self, office_id: str, data_type: str) -> List[Dict[str, Any]]:
        """
        Load a whole collection.

        Args:
            office_id: Office ID
            data_type: Collection type string

        Returns:
            The stored sequence, or an empty list if never written
        """
        return await self.backend.get_list(keys.collection_key(office_id, data_type))

    async def get_version(self, office_id: str, data_type: str) -> int:
        version = await self.backend.get(keys.version_key(office_id, data_type))
        return int(version or 0)

    async def save_collection(self, office_id: str, data_type: str, records: List[Any]) -> int:
        """
        Overwrite a whole collection and bump its version.

        Args:
            office_id: Office ID
            data_type: Collection type string
            records: Full sequence to store

        Returns:
            The new version number
        """
        version = await self.get_version(office_id, data_type) + 1
        await self.backend.set(keys.collection_key(office_id, data_type), records)
        await self.backend.set(keys.version_key(office_id, data_type), version)
        return version

    @staticmethod
    def find_record(records: List[Dict[str, Any]], record_id: str) -> Tuple[int, Optional[Dict[str, Any]]]:
        """
        Locate a record by its ``id`` field.

        Returns:
            (index, record), or (-1, None) when absent
        """
        for index, record in enumerate(records):
            if isinstance(record, dict) and record.get("id") == record_id:
                return index, record
        return -1, None
