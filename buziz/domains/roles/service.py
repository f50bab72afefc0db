"""
Role service for business logic.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException, status

from buziz.core.permissions import OWNER_ROLE
from buziz.db.base_repository import new_id
from buziz.domains.base import BaseService
from buziz.domains.offices.repository import OfficeRepository
from buziz.storage.backends import StorageBackend

logger = logging.getLogger(__name__)


class RoleService(BaseService):
    """
    Service for role-related business logic.
    """

    async def get_roles(self, office_id: str) -> List[Dict[str, Any]]:
        async def operation(backend: StorageBackend) -> List[Dict[str, Any]]:
            return await OfficeRepository(backend).get_roles(office_id)

        return await self.data_access.run(operation, "get roles")

    async def create_role(self, office_id: str, role_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a new role.

        Args:
            office_id: Office ID
            role_data: name, permissions, color and description

        Returns:
            Created role record

        Raises:
            HTTPException: If the name is already used in the office
        """
        async def operation(backend: StorageBackend) -> Tuple[Dict[str, Any], int]:
            repo = OfficeRepository(backend)
            roles = await repo.get_roles(office_id)

            if any(r.get("name") == role_data["name"] for r in roles):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Role with name '{role_data['name']}' already exists"
                )

            role = {"id": new_id(), "officeId": office_id, **role_data}
            version = await repo.save_roles(office_id, roles + [role])
            return role, version

        role, version = await self.data_access.run(operation, "create role")
        self.publish(office_id, "roles", "create", version)
        return role

    async def update_role(self, office_id: str, role_id: str, role_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Update an existing role.

        Args:
            office_id: Office ID
            role_id: Role ID
            role_data: Fields to change

        Returns:
            Updated role or None if not found

        Raises:
            HTTPException: If renaming the Owner role or taking a used name
        """
        async def operation(backend: StorageBackend) -> Tuple[Optional[Dict[str, Any]], int]:
            repo = OfficeRepository(backend)
            roles = await repo.get_roles(office_id)

            index, existing_role = repo.find_record(roles, role_id)
            if existing_role is None:
                return None, 0

            new_name = role_data.get("name")
            if new_name is not None and new_name != existing_role.get("name"):
                if existing_role.get("name") == OWNER_ROLE:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail=f"Cannot change the name of the '{OWNER_ROLE}' role"
                    )
                if any(r.get("name") == new_name for r in roles):
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail=f"Role with name '{new_name}' already exists"
                    )

            updated_role = {**existing_role, **role_data}
            roles[index] = updated_role
            version = await repo.save_roles(office_id, roles)
            return updated_role, version

        role, version = await self.data_access.run(operation, "update role")
        if role is not None:
            self.publish(office_id, "roles", "update", version)
        return role

    async def delete_role(self, office_id: str, role_id: str) -> bool:
        """
        Delete a role.

        Args:
            office_id: Office ID
            role_id: Role ID

        Returns:
            True if the role was deleted, False if not found

        Raises:
            HTTPException: If the role is the Owner role or still assigned
        """
        async def operation(backend: StorageBackend) -> Tuple[bool, int]:
            repo = OfficeRepository(backend)
            roles = await repo.get_roles(office_id)

            _, role = repo.find_record(roles, role_id)
            if role is None:
                return False, 0

            if role.get("name") == OWNER_ROLE:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Cannot delete {OWNER_ROLE} role"
                )

            employees = await repo.get_employees(office_id)
            holders = [e for e in employees if e.get("role") == role.get("name")]
            if holders:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Cannot delete role. {len(holders)} employee(s) have this role."
                )

            version = await repo.save_roles(office_id, [r for r in roles if r.get("id") != role_id])
            return True, version

        deleted, version = await self.data_access.run(operation, "delete role")
        if deleted:
            self.publish(office_id, "roles", "delete", version)
            logger.info(f"Deleted role {role_id} from office {office_id}")
        return deleted
