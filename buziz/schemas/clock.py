"""
Clock schema models for validation.
"""
from typing import List, Optional

from buziz.schemas.base import CamelModel


class ClockRequest(CamelModel):
    employee_id: str
    office_id: str


class ClockEntry(CamelModel):
    id: str
    employee_id: str
    office_id: str
    clock_in: str
    clock_out: Optional[str] = None
    hours_worked: float = 0
    wages_earned: float = 0


class ClockEntryResponse(CamelModel):
    clock_entry: ClockEntry


class ClockStatusResponse(CamelModel):
    active_clock: Optional[ClockEntry] = None


class ClockHistoryResponse(CamelModel):
    clock_history: List[ClockEntry]
