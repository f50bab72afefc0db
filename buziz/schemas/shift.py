"""
Recurring shift schema models for validation.
"""
from datetime import date
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from buziz.schemas.base import CamelModel
from buziz.utils.datetime_handler import DateTimeHandler


class RecurringPatternCreate(CamelModel):
    """Schema for creating recurring shift patterns."""
    title: str = Field(..., min_length=1)
    start_time: str
    end_time: str
    assigned_to: str = Field(..., min_length=1)
    assignment_type: Literal["employee", "role"] = "employee"
    pattern: Literal["weekly", "biweekly", "monthly"] = "weekly"
    days_of_week: List[int] = Field(..., min_length=1)
    start_date: date
    end_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if DateTimeHandler.parse_time(v) is None:
            raise ValueError("Time must be HH:MM (24-hour)")
        return v

    @field_validator("days_of_week")
    @classmethod
    def validate_days(cls, v: List[int]) -> List[int]:
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("Days of week must be between 0 (Sunday) and 6 (Saturday)")
        return sorted(set(v))

    @model_validator(mode="after")
    def validate_range(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class RecurringPatternResponse(RecurringPatternCreate):
    id: str


class GenerateShiftsRequest(CamelModel):
    today: Optional[date] = None
    horizon_days: Optional[int] = Field(default=None, ge=1, le=366)
