"""
Recurring shift expansion.
"""
import logging
import uuid
from datetime import date, timedelta
from typing import Any, Dict, List, Set, Tuple

from buziz.utils.datetime_handler import DateTimeHandler

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 90

# Fields copied from a pattern onto every shift it generates
INHERITED_FIELDS = ("title", "startTime", "endTime", "assignedTo", "assignmentType", "notes")


def expand_recurring_shifts(
        patterns: List[Dict[str, Any]],
        shifts: List[Dict[str, Any]],
        today: date,
        horizon_days: int = DEFAULT_HORIZON_DAYS
) -> List[Dict[str, Any]]:
    """
    Generate the shifts needed to cover [today, today + horizon_days].

    For each pattern, every date from max(startDate, today) to
    min(endDate, horizon) whose weekday (Sunday = 0) is in daysOfWeek gets a
    shift, unless a shift for the same (date, recurringId) already exists.
    Weekly, biweekly and monthly patterns all expand on weekday alone.

    Args:
        patterns: Recurring pattern records
        shifts: Shifts already materialized
        today: First date of the window
        horizon_days: Window length in days

    Returns:
        Newly generated shifts only; the input lists are not modified
    """
    horizon = today + timedelta(days=horizon_days)
    existing: Set[Tuple[str, str]] = {
        (s.get("date"), s.get("recurringId"))
        for s in shifts
        if isinstance(s, dict) and s.get("recurringId")
    }

    generated = []
    for pattern in patterns:
        if not _is_expandable(pattern):
            logger.warning(f"Skipping malformed recurring pattern {pattern!r:.80}")
            continue

        pattern_id = pattern["id"]
        start = DateTimeHandler.parse_date(pattern["startDate"])
        end = DateTimeHandler.parse_date(pattern.get("endDate")) or horizon
        end = min(end, horizon)
        days = set(pattern["daysOfWeek"])

        for current in DateTimeHandler.iter_dates(max(start, today), end):
            if DateTimeHandler.day_of_week(current) not in days:
                continue

            date_str = DateTimeHandler.format_date(current)
            if (date_str, pattern_id) in existing:
                continue

            shift = {"id": str(uuid.uuid4()), "date": date_str}
            shift.update({field: pattern.get(field) for field in INHERITED_FIELDS if field in pattern})
            shift["isRecurring"] = True
            shift["recurringId"] = pattern_id

            generated.append(shift)
            existing.add((date_str, pattern_id))

    return generated


def _is_expandable(pattern: Any) -> bool:
    """
    Check the fields the expander relies on. Collections can be written
    wholesale, so stored patterns are not guaranteed to be well formed.
    """
    if not isinstance(pattern, dict):
        return False
    if not isinstance(pattern.get("id"), str) or not pattern["id"]:
        return False
    if DateTimeHandler.parse_date(pattern.get("startDate")) is None:
        return False
    end_date = pattern.get("endDate")
    if end_date is not None and DateTimeHandler.parse_date(end_date) is None:
        return False

    days = pattern.get("daysOfWeek")
    if not isinstance(days, list):
        return False
    return all(isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6 for d in days)
