"""
Office service for business logic.
"""
import logging
import secrets
import string
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException, status

from buziz.core.permissions import DEFAULT_MEMBER_ROLE, DEFAULT_ROLES, OWNER_ROLE
from buziz.db.base_repository import new_id
from buziz.domains.base import BaseService
from buziz.domains.offices.repository import OfficeRepository
from buziz.storage.backends import StorageBackend

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.digits + string.ascii_uppercase
CODE_LENGTH = 6
MAX_CODE_ATTEMPTS = 10
EMPLOYEE_NUMBER_WIDTH = 5


def generate_office_code() -> str:
    """Random 6-character uppercase base-36 join code."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def normalize_office_code(code: str) -> str:
    return (code or "").strip().upper()


def format_employee_number(position: int) -> str:
    return str(position).zfill(EMPLOYEE_NUMBER_WIDTH)


class OfficeService(BaseService):
    """
    Service for office creation, membership and lookup.
    """

    async def create_office(self, user_id: str, name: str, office_name: str) -> Dict[str, Any]:
        """
        Create an office with its creator and default roles.

        Args:
            user_id: Authenticated user creating the office
            name: Display name of the creator inside the office
            office_name: Name of the office

        Returns:
            Dict with office, employee and roles
        """
        async def operation(backend: StorageBackend) -> Dict[str, Any]:
            repo = OfficeRepository(backend)

            code = await self._allocate_code(repo)
            office_id = new_id()
            employee_id = new_id()

            office = {
                "id": office_id,
                "code": code,
                "creatorId": user_id,
                "name": office_name,
            }
            employee = {
                "id": employee_id,
                "userId": user_id,
                "officeId": office_id,
                "name": name,
                "employeeNumber": format_employee_number(1),
                "role": OWNER_ROLE,
                "isCreator": True,
                "isHeadManager": True,
                "payRate": 0,
            }
            roles = [
                {"id": new_id(), "officeId": office_id, **role}
                for role in DEFAULT_ROLES
            ]

            await repo.save_office(office)
            await repo.save_employee(employee)
            await repo.save_employees(office_id, [employee])
            await repo.save_roles(office_id, roles)
            await repo.add_membership(user_id, office_id, employee_id)
            await repo.set_current_office(user_id, office_id)

            return {"office": office, "employee": employee, "roles": roles}

        result = await self.data_access.run(operation, "create office")
        logger.info(f"Created office {result['office']['id']} with code {result['office']['code']}")
        return result

    async def join_office(self, user_id: str, office_code: str, name: str) -> Dict[str, Any]:
        """
        Join an existing office by its code.

        Args:
            user_id: Authenticated user joining
            office_code: Join code, any case
            name: Display name inside the office

        Returns:
            Dict with office, employee, employees and roles

        Raises:
            HTTPException: If no office has the code or the user is already a member
        """
        code = normalize_office_code(office_code)

        async def operation(backend: StorageBackend) -> Tuple[Dict[str, Any], int]:
            repo = OfficeRepository(backend)

            office = await repo.find_by_code(code)
            if not office:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Office not found"
                )

            office_id = office["id"]
            employees = await repo.get_employees(office_id)
            if any(e.get("userId") == user_id for e in employees):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="You are already a member of this office"
                )

            employee = {
                "id": new_id(),
                "userId": user_id,
                "officeId": office_id,
                "name": name,
                "employeeNumber": format_employee_number(len(employees) + 1),
                "role": DEFAULT_MEMBER_ROLE,
                "isCreator": False,
                "isHeadManager": False,
                "payRate": 0,
            }
            employees.append(employee)

            version = await repo.save_employees(office_id, employees)
            await repo.save_employee(employee)
            await repo.add_membership(user_id, office_id, employee["id"])
            await repo.set_current_office(user_id, office_id)
            roles = await repo.get_roles(office_id)

            result = {
                "office": office,
                "employee": employee,
                "employees": employees,
                "roles": roles,
            }
            return result, version

        result, version = await self.data_access.run(operation, "join office")
        office_id = result["office"]["id"]
        self.publish(office_id, "employees", "join", version)
        logger.info(f"Employee {result['employee']['employeeNumber']} joined office {office_id}")
        return result

    async def get_user_offices(self, user_id: str) -> Dict[str, List[Dict[str, Any]]]:
        """
        Get every office a user belongs to.

        Args:
            user_id: User ID

        Returns:
            Dict with an ``offices`` list of {office, employee, employees, roles}
        """
        async def operation(backend: StorageBackend) -> Dict[str, List[Dict[str, Any]]]:
            repo = OfficeRepository(backend)
            offices = []

            for employee_id in await repo.list_memberships(user_id):
                employee = await repo.get_employee(employee_id)
                if not employee:
                    continue
                office = await repo.get_office(employee["officeId"])
                if not office:
                    continue
                offices.append({
                    "office": office,
                    "employee": employee,
                    "employees": await repo.get_employees(office["id"]),
                    "roles": await repo.get_roles(office["id"]),
                })

            return {"offices": offices}

        return await self.data_access.run(operation, "get user offices")

    async def get_office(self, office_id: str) -> Dict[str, Any]:
        """
        Get an office with its employees and roles.

        Args:
            office_id: Office ID

        Returns:
            Dict with office, employees and roles

        Raises:
            HTTPException: If the office does not exist
        """
        async def operation(backend: StorageBackend) -> Dict[str, Any]:
            repo = OfficeRepository(backend)
            office = await repo.get_office(office_id)
            if not office:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Office not found"
                )
            return {
                "office": office,
                "employees": await repo.get_employees(office_id),
                "roles": await repo.get_roles(office_id),
            }

        return await self.data_access.run(operation, "get office")

    async def update_office_name(self, office_id: str, name: str) -> Dict[str, Any]:
        """
        Rename an office. Every other office field is immutable.

        Args:
            office_id: Office ID
            name: New office name

        Returns:
            Updated office record
        """
        async def operation(backend: StorageBackend) -> Dict[str, Any]:
            repo = OfficeRepository(backend)
            office = await repo.get_office(office_id)
            if not office:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Office not found"
                )
            office = {**office, "name": name}
            await repo.save_office(office)
            return office

        office = await self.data_access.run(operation, "update office")
        self.publish(office_id, "office", "update")
        return office

    async def get_member(self, user_id: str, office_id: str) -> Optional[Dict[str, Any]]:
        """
        Get the employee record a user holds in an office.

        Args:
            user_id: User ID
            office_id: Office ID

        Returns:
            Employee record or None if the user is not a member
        """
        async def operation(backend: StorageBackend) -> Optional[Dict[str, Any]]:
            repo = OfficeRepository(backend)
            employee_id = await repo.get_membership(user_id, office_id)
            if not employee_id:
                return None
            return await repo.get_employee(employee_id)

        return await self.data_access.run(operation, "get member")

    async def get_current_office(self, user_id: str) -> Optional[str]:
        async def operation(backend: StorageBackend) -> Optional[str]:
            return await OfficeRepository(backend).get_current_office(user_id)

        return await self.data_access.run(operation, "get current office")

    async def set_current_office(self, user_id: str, office_id: str) -> str:
        """
        Remember which office a user is working in.

        Raises:
            HTTPException: If the user is not a member of the office
        """
        async def operation(backend: StorageBackend) -> str:
            repo = OfficeRepository(backend)
            if not await repo.get_membership(user_id, office_id):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="You are not a member of this office"
                )
            await repo.set_current_office(user_id, office_id)
            return office_id

        return await self.data_access.run(operation, "set current office")

    async def _allocate_code(self, repo: OfficeRepository) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_office_code()
            if not await repo.find_by_code(code):
                return code
            logger.warning(f"Office code collision on {code}, generating another")

        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not allocate a unique office code"
        )
