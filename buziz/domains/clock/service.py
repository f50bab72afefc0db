"""
Clock service for time tracking and wages.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import HTTPException, status

from buziz.db.base_repository import new_id
from buziz.domains.base import BaseService
from buziz.domains.offices.repository import OfficeRepository
from buziz.storage import keys
from buziz.storage.backends import StorageBackend
from buziz.storage.data_access import DataAccess
from buziz.storage.events import ChangeFeed
from buziz.utils.datetime_handler import DateTimeHandler

logger = logging.getLogger(__name__)

CLOCK_HISTORY = "clock-history"


class ClockService(BaseService):
    """
    Clock-in/out with an append-only office history and a per-employee
    active slot.
    """

    def __init__(
            self,
            data_access: DataAccess,
            feed: Optional[ChangeFeed] = None,
            clock: Callable[[], datetime] = DateTimeHandler.get_current_datetime
    ):
        super().__init__(data_access, feed)
        self.clock = clock

    async def clock_in(self, employee_id: str, office_id: str) -> Dict[str, Any]:
        """
        Start a clock entry for an employee.

        Args:
            employee_id: Employee ID
            office_id: Office ID

        Returns:
            Dict with the new clockEntry

        Raises:
            HTTPException: If the employee is already clocked in
        """
        clock_in_at = self.clock()

        async def operation(backend: StorageBackend) -> Tuple[Dict[str, Any], int]:
            repo = OfficeRepository(backend)

            if await backend.get(keys.active_clock_key(employee_id)):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Employee is already clocked in"
                )

            entry = {
                "id": new_id(),
                "employeeId": employee_id,
                "officeId": office_id,
                "clockIn": DateTimeHandler.to_iso(clock_in_at),
                "clockOut": None,
                "hoursWorked": 0,
                "wagesEarned": 0,
            }

            history = await repo.get_collection(office_id, CLOCK_HISTORY)
            history.append(entry)
            version = await repo.save_collection(office_id, CLOCK_HISTORY, history)
            await backend.set(keys.active_clock_key(employee_id), entry)
            return entry, version

        entry, version = await self.data_access.run(operation, "clock in")
        self.publish(office_id, CLOCK_HISTORY, "clock-in", version)
        logger.info(f"Employee {employee_id} clocked in at {entry['clockIn']}")
        return {"clockEntry": entry}

    async def clock_out(self, employee_id: str, office_id: str) -> Dict[str, Any]:
        """
        Close the employee's active clock entry and compute wages.
        Hours are the raw wall-clock delta; wages are hours times pay rate.

        Args:
            employee_id: Employee ID
            office_id: Office ID

        Returns:
            Dict with the completed clockEntry

        Raises:
            HTTPException: If there is no active clock-in
        """
        clock_out_at = self.clock()

        async def operation(backend: StorageBackend) -> Tuple[Dict[str, Any], int]:
            repo = OfficeRepository(backend)

            active = await backend.get(keys.active_clock_key(employee_id))
            if not active:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="No active clock-in found"
                )

            pay_rate = await self._pay_rate(repo, employee_id, office_id)
            hours = DateTimeHandler.hours_between(DateTimeHandler.parse_iso(active["clockIn"]), clock_out_at)
            wages = hours * pay_rate

            entry = {
                **active,
                "clockOut": DateTimeHandler.to_iso(clock_out_at),
                "hoursWorked": round(hours, 2),
                "wagesEarned": round(wages, 2),
            }

            history = await repo.get_collection(office_id, CLOCK_HISTORY)
            history = [entry if h.get("id") == active["id"] else h for h in history]
            version = await repo.save_collection(office_id, CLOCK_HISTORY, history)
            await backend.delete(keys.active_clock_key(employee_id))
            return entry, version

        entry, version = await self.data_access.run(operation, "clock out")
        self.publish(office_id, CLOCK_HISTORY, "clock-out", version)
        logger.info(f"Employee {employee_id} clocked out after {entry['hoursWorked']} hours")
        return {"clockEntry": entry}

    async def get_clock_status(self, employee_id: str) -> Dict[str, Optional[Dict[str, Any]]]:
        async def operation(backend: StorageBackend) -> Dict[str, Optional[Dict[str, Any]]]:
            return {"activeClock": await backend.get(keys.active_clock_key(employee_id))}

        return await self.data_access.run(operation, "get clock status")

    async def get_clock_history(self, office_id: str) -> Dict[str, List[Dict[str, Any]]]:
        async def operation(backend: StorageBackend) -> Dict[str, List[Dict[str, Any]]]:
            return {"clockHistory": await OfficeRepository(backend).get_collection(office_id, CLOCK_HISTORY)}

        return await self.data_access.run(operation, "get clock history")

    @staticmethod
    async def _pay_rate(repo: OfficeRepository, employee_id: str, office_id: str) -> float:
        employee = await repo.get_employee(employee_id)
        if employee is None:
            _, employee = repo.find_record(await repo.get_employees(office_id), employee_id)
        return float((employee or {}).get("payRate") or 0)
