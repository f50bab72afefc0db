"""
Office repository for storage operations.
"""
from typing import Any, Dict, List, Optional

from buziz.db.base_repository import BaseRepository
from buziz.storage import keys


class OfficeRepository(BaseRepository):
    """
    Repository for offices, their employees and roles.
    Extends BaseRepository with office-specific operations.
    """

    async def get_office(self, office_id: str) -> Optional[Dict[str, Any]]:
        return await self.backend.get(keys.office_key(office_id))

    async def save_office(self, office: Dict[str, Any]) -> None:
        await self.backend.set(keys.office_key(office["id"]), office)

    async def find_by_code(self, code: str) -> Optional[Dict[str, Any]]:
        """
        Find an office by join code.
        Scans every office record, so cost grows with the number of offices.

        Args:
            code: Normalized join code

        Returns:
            Office record or None if no office uses the code
        """
        for key, value in await self.backend.items_with_prefix("office:"):
            if not keys.is_office_record_key(key) or not isinstance(value, dict):
                continue
            if value.get("code") == code:
                return value
        return None

    async def get_employees(self, office_id: str) -> List[Dict[str, Any]]:
        return await self.get_collection(office_id, "employees")

    async def save_employees(self, office_id: str, employees: List[Dict[str, Any]]) -> int:
        return await self.save_collection(office_id, "employees", employees)

    async def get_roles(self, office_id: str) -> List[Dict[str, Any]]:
        return await self.get_collection(office_id, "roles")

    async def save_roles(self, office_id: str, roles: List[Dict[str, Any]]) -> int:
        return await self.save_collection(office_id, "roles", roles)

    async def get_employee(self, employee_id: str) -> Optional[Dict[str, Any]]:
        return await self.backend.get(keys.employee_key(employee_id))

    async def save_employee(self, employee: Dict[str, Any]) -> None:
        await self.backend.set(keys.employee_key(employee["id"]), employee)

    async def add_membership(self, user_id: str, office_id: str, employee_id: str) -> None:
        await self.backend.set(keys.membership_key(user_id, office_id), employee_id)

    async def get_membership(self, user_id: str, office_id: str) -> Optional[str]:
        return await self.backend.get(keys.membership_key(user_id, office_id))

    async def list_memberships(self, user_id: str) -> List[str]:
        """
        Get the employee IDs a user holds across offices.

        Args:
            user_id: User ID

        Returns:
            Employee IDs ordered by office ID
        """
        return [value for _, value in await self.backend.items_with_prefix(keys.membership_prefix(user_id))]

    async def get_current_office(self, user_id: str) -> Optional[str]:
        return await self.backend.get(keys.current_office_key(user_id))

    async def set_current_office(self, user_id: str, office_id: str) -> None:
        await self.backend.set(keys.current_office_key(user_id), office_id)
