"""
Employee service for business logic.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import HTTPException, status

from buziz.core.permissions import OWNER_ROLE, find_role_by_name
from buziz.domains.base import BaseService
from buziz.domains.offices.repository import OfficeRepository
from buziz.storage.backends import StorageBackend

logger = logging.getLogger(__name__)

# Fields fixed at creation: identity, membership and creator status
IMMUTABLE_FIELDS = {"id", "userId", "officeId", "employeeNumber", "isCreator"}


class EmployeeService(BaseService):
    """
    Service for employee-related business logic.
    """

    async def get_employee(self, employee_id: str) -> Optional[Dict[str, Any]]:
        async def operation(backend: StorageBackend) -> Optional[Dict[str, Any]]:
            return await OfficeRepository(backend).get_employee(employee_id)

        return await self.data_access.run(operation, "get employee")

    async def update_employee(self, employee_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge updates into an employee record and the office employee list.

        Args:
            employee_id: Employee ID
            updates: Fields to change; immutable fields are ignored

        Returns:
            Dict with the updated employee and the full employee list

        Raises:
            HTTPException: If the employee does not exist, the new role is unknown
                or the change would take the creator off the owner role
        """
        changes = {k: v for k, v in updates.items() if k not in IMMUTABLE_FIELDS}

        async def operation(backend: StorageBackend) -> Tuple[Dict[str, Any], int]:
            repo = OfficeRepository(backend)

            employee = await repo.get_employee(employee_id)
            if not employee:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Employee not found"
                )

            if "role" in changes:
                await self._check_role_change(repo, employee, changes["role"])

            updated_employee = {**employee, **changes}
            await repo.save_employee(updated_employee)

            office_id = employee["officeId"]
            employees = await repo.get_employees(office_id)
            updated_employees = [
                updated_employee if e.get("id") == employee_id else e
                for e in employees
            ]
            version = await repo.save_employees(office_id, updated_employees)

            return {"employee": updated_employee, "employees": updated_employees}, version

        result, version = await self.data_access.run(operation, "update employee")
        self.publish(result["employee"]["officeId"], "employees", "update", version)
        return result

    @staticmethod
    async def _check_role_change(repo: OfficeRepository, employee: Dict[str, Any], role: str) -> None:
        if employee.get("isCreator") and role != OWNER_ROLE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="The creator's role cannot be changed"
            )
        roles = await repo.get_roles(employee["officeId"])
        if find_role_by_name(roles, role) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Role '{role}' does not exist"
            )
