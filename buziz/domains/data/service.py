"""
Generic per-office record collections.

Every collection (shifts, tasks, inventory, chat messages, ...) is one JSON
array stored under ``office:{officeId}:{type}``. Writers may pass the
version they read; a stale version is rejected instead of overwriting a
concurrent write.
"""
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException, status

from buziz.db.base_repository import BaseRepository, new_id
from buziz.domains.base import BaseService
from buziz.storage.backends import StorageBackend

logger = logging.getLogger(__name__)

DATA_TYPE_PATTERN = r"^[a-z][a-z0-9-]*$"

# Collection types used by the dashboard views
DATA_TYPES = [
    "activity-logs",
    "announcements",
    "chat-messages",
    "clock-history",
    "direct-messages",
    "employee-profiles",
    "employee-statuses",
    "employees",
    "inventory",
    "leave-requests",
    "meetings",
    "notifications",
    "office-theme",
    "parking-requests",
    "parking-spots",
    "recurring-shifts",
    "roles",
    "security-cameras",
    "shift-swap-board",
    "shifts",
    "suppliers",
    "tasks",
    "time-off-balances",
    "wage-settings",
]

# Kept consistent by their own routes; the generic writes must not touch them
SERVICE_OWNED_TYPES = frozenset({"employees", "roles", "clock-history"})


def validate_data_type(data_type: str) -> str:
    if not re.match(DATA_TYPE_PATTERN, data_type or ""):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid data type '{data_type}'"
        )
    if data_type not in DATA_TYPES:
        logger.debug(f"Accepting unlisted data type '{data_type}'")
    return data_type


async def check_version(repo: BaseRepository, office_id: str, data_type: str, expected_version: Optional[int]) -> None:
    """
    Reject a write based on a stale read.

    Raises:
        HTTPException: 409 if expected_version is given and not current
    """
    if expected_version is None:
        return
    current = await repo.get_version(office_id, data_type)
    if current != expected_version:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"'{data_type}' was modified concurrently (expected version {expected_version}, found {current})"
        )


class DataService(BaseService):
    """
    Service for whole-collection and per-record access.
    """

    async def get_data(self, office_id: str, data_type: str) -> Dict[str, Any]:
        """
        Get a whole collection.

        Args:
            office_id: Office ID
            data_type: Collection type

        Returns:
            Dict with data (empty list if never written) and version
        """
        validate_data_type(data_type)

        async def operation(backend: StorageBackend) -> Dict[str, Any]:
            repo = BaseRepository(backend)
            return {
                "data": await repo.get_collection(office_id, data_type),
                "version": await repo.get_version(office_id, data_type),
            }

        return await self.data_access.run(operation, f"get {data_type}")

    async def update_data(
            self,
            office_id: str,
            data_type: str,
            data: List[Any],
            expected_version: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Replace a whole collection.

        Args:
            office_id: Office ID
            data_type: Collection type
            data: Full new sequence
            expected_version: Version the caller read, or None to overwrite blindly

        Returns:
            Dict with success, data and the new version

        Raises:
            HTTPException: 409 on a version mismatch
        """
        validate_data_type(data_type)

        async def operation(backend: StorageBackend) -> int:
            repo = BaseRepository(backend)
            await check_version(repo, office_id, data_type, expected_version)
            return await repo.save_collection(office_id, data_type, data)

        version = await self.data_access.run(operation, f"update {data_type}")
        self.publish(office_id, data_type, "replace", version)
        return {"success": True, "data": data, "version": version}

    async def create_data(self, office_id: str, data_type: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Append one record to a collection, assigning an id if it has none.

        Args:
            office_id: Office ID
            data_type: Collection type
            record: Record to append

        Returns:
            Dict with success, the full collection and the new version
        """
        validate_data_type(data_type)
        record = {"id": new_id(), **record} if "id" not in record else record

        async def operation(backend: StorageBackend) -> Tuple[List[Any], int]:
            repo = BaseRepository(backend)
            records = await repo.get_collection(office_id, data_type)
            records.append(record)
            return records, await repo.save_collection(office_id, data_type, records)

        records, version = await self.data_access.run(operation, f"create {data_type}")
        self.publish(office_id, data_type, "create", version)
        return {"success": True, "data": records, "version": version}

    async def update_record(
            self,
            office_id: str,
            data_type: str,
            record_id: str,
            updates: Dict[str, Any],
            expected_version: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Merge updates into one record of a collection.

        Raises:
            HTTPException: 404 if no record has the id, 409 on a version mismatch
        """
        validate_data_type(data_type)
        changes = {k: v for k, v in updates.items() if k != "id"}

        async def operation(backend: StorageBackend) -> Tuple[Dict[str, Any], int]:
            repo = BaseRepository(backend)
            await check_version(repo, office_id, data_type, expected_version)

            records = await repo.get_collection(office_id, data_type)
            index, record = repo.find_record(records, record_id)
            if record is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Record {record_id} not found in '{data_type}'"
                )

            records[index] = {**record, **changes}
            return records[index], await repo.save_collection(office_id, data_type, records)

        record, version = await self.data_access.run(operation, f"update {data_type} record")
        self.publish(office_id, data_type, "update", version)
        return {"success": True, "record": record, "version": version}

    async def delete_record(
            self,
            office_id: str,
            data_type: str,
            record_id: str,
            expected_version: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Remove one record from a collection.

        Raises:
            HTTPException: 404 if no record has the id, 409 on a version mismatch
        """
        validate_data_type(data_type)

        async def operation(backend: StorageBackend) -> int:
            repo = BaseRepository(backend)
            await check_version(repo, office_id, data_type, expected_version)

            records = await repo.get_collection(office_id, data_type)
            index, record = repo.find_record(records, record_id)
            if record is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Record {record_id} not found in '{data_type}'"
                )

            del records[index]
            return await repo.save_collection(office_id, data_type, records)

        version = await self.data_access.run(operation, f"delete {data_type} record")
        self.publish(office_id, data_type, "delete", version)
        return {"success": True, "version": version}
