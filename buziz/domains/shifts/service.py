"""
Shift service for recurring patterns and their generated shifts.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException, status

from buziz.core.config import settings
from buziz.db.base_repository import BaseRepository, new_id
from buziz.domains.base import BaseService
from buziz.domains.shifts.recurrence import expand_recurring_shifts
from buziz.storage.backends import StorageBackend
from buziz.utils.datetime_handler import DateTimeHandler

logger = logging.getLogger(__name__)

SHIFTS = "shifts"
RECURRING_SHIFTS = "recurring-shifts"


class ShiftService(BaseService):
    """
    Service for recurring shift patterns.
    """

    async def get_patterns(self, office_id: str) -> List[Dict[str, Any]]:
        async def operation(backend: StorageBackend) -> List[Dict[str, Any]]:
            return await BaseRepository(backend).get_collection(office_id, RECURRING_SHIFTS)

        return await self.data_access.run(operation, "get recurring patterns")

    async def create_pattern(self, office_id: str, pattern_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a new recurring pattern.

        Args:
            office_id: Office ID
            pattern_data: Pattern fields

        Returns:
            Created pattern

        Raises:
            HTTPException: If no weekday is selected or the date range is inverted
        """
        if not pattern_data.get("daysOfWeek"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Select at least one day of the week"
            )
        start = DateTimeHandler.parse_date(pattern_data.get("startDate"))
        end = DateTimeHandler.parse_date(pattern_data.get("endDate"))
        if start and end and end < start:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="End date must not be before start date"
            )

        pattern = {"id": new_id(), **pattern_data}

        async def operation(backend: StorageBackend) -> int:
            repo = BaseRepository(backend)
            patterns = await repo.get_collection(office_id, RECURRING_SHIFTS)
            patterns.append(pattern)
            return await repo.save_collection(office_id, RECURRING_SHIFTS, patterns)

        version = await self.data_access.run(operation, "create recurring pattern")
        self.publish(office_id, RECURRING_SHIFTS, "create", version)
        return pattern

    async def delete_pattern(
            self,
            office_id: str,
            pattern_id: str,
            remove_future_shifts: bool = False,
            today: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Delete a recurring pattern.

        Args:
            office_id: Office ID
            pattern_id: Pattern ID
            remove_future_shifts: Also drop shifts it generated from today on
            today: Reference date, defaults to the current UTC date

        Returns:
            Dict with success and the number of shifts removed

        Raises:
            HTTPException: If the pattern does not exist
        """
        cutoff = DateTimeHandler.format_date(today or DateTimeHandler.get_current_date())

        async def operation(backend: StorageBackend) -> Tuple[int, int, Optional[int]]:
            repo = BaseRepository(backend)
            patterns = await repo.get_collection(office_id, RECURRING_SHIFTS)
            index, pattern = repo.find_record(patterns, pattern_id)
            if pattern is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Recurring pattern not found"
                )
            del patterns[index]
            pattern_version = await repo.save_collection(office_id, RECURRING_SHIFTS, patterns)

            if not remove_future_shifts:
                return 0, pattern_version, None

            shifts = await repo.get_collection(office_id, SHIFTS)
            kept = [
                s for s in shifts
                if not (
                    isinstance(s, dict)
                    and s.get("recurringId") == pattern_id
                    and isinstance(s.get("date"), str)
                    and s["date"] >= cutoff
                )
            ]
            removed = len(shifts) - len(kept)
            shift_version = await repo.save_collection(office_id, SHIFTS, kept) if removed else None
            return removed, pattern_version, shift_version

        removed, pattern_version, shift_version = await self.data_access.run(operation, "delete recurring pattern")
        self.publish(office_id, RECURRING_SHIFTS, "delete", pattern_version)
        if shift_version is not None:
            self.publish(office_id, SHIFTS, "delete", shift_version)
        return {"success": True, "removedShifts": removed}

    async def generate_recurring_shifts(
            self,
            office_id: str,
            today: Optional[date] = None,
            horizon_days: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Materialize shifts for every pattern over the horizon.
        Running it again without new patterns generates nothing.

        Args:
            office_id: Office ID
            today: First day of the window, defaults to the current UTC date
            horizon_days: Window length, defaults to RECURRING_HORIZON_DAYS

        Returns:
            Dict with the generated shifts and the collection version
        """
        today = today or DateTimeHandler.get_current_date()
        horizon_days = horizon_days if horizon_days is not None else settings.RECURRING_HORIZON_DAYS

        async def operation(backend: StorageBackend) -> Tuple[List[Dict[str, Any]], int]:
            repo = BaseRepository(backend)
            patterns = await repo.get_collection(office_id, RECURRING_SHIFTS)
            shifts = await repo.get_collection(office_id, SHIFTS)

            generated = expand_recurring_shifts(patterns, shifts, today, horizon_days)
            if not generated:
                return [], await repo.get_version(office_id, SHIFTS)

            return generated, await repo.save_collection(office_id, SHIFTS, shifts + generated)

        generated, version = await self.data_access.run(operation, "generate recurring shifts")
        if generated:
            self.publish(office_id, SHIFTS, "generate", version)
            logger.info(f"Generated {len(generated)} recurring shifts for office {office_id}")
        return {"generated": generated, "count": len(generated), "version": version}
