"""
Date and time helpers shared by the clock, shift and subscription services.
"""
import logging
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Optional, Union

logger = logging.getLogger(__name__)


class DateTimeHandler:
    """
    Centralized helpers for parsing, formatting and walking dates.
    Timestamps are stored as ISO-8601 UTC strings, dates as YYYY-MM-DD and
    times of day as HH:MM.
    """

    # Standard format strings
    DATE_FORMAT = "%Y-%m-%d"
    TIME_FORMAT = "%H:%M"

    @classmethod
    def parse_date(cls, date_str: str) -> Optional[date]:
        """
        Parse a date string in YYYY-MM-DD format to a date object.

        Args:
            date_str: String in YYYY-MM-DD format

        Returns:
            Date object or None if parsing fails
        """
        if not date_str or not isinstance(date_str, str):
            return None

        if not re.match(r'^\d{4}-\d{2}-\d{2}$', date_str):
            logger.debug(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")
            return None

        try:
            return datetime.strptime(date_str, cls.DATE_FORMAT).date()
        except ValueError as e:
            logger.debug(f"Error parsing date {date_str}: {str(e)}")
            return None

    @classmethod
    def format_date(cls, date_obj: Union[date, datetime, None]) -> Optional[str]:
        """
        Format a date/datetime object to YYYY-MM-DD string.

        Args:
            date_obj: Date or datetime object

        Returns:
            Formatted date string or None
        """
        if date_obj is None:
            return None

        if isinstance(date_obj, datetime):
            date_obj = date_obj.date()

        return date_obj.strftime(cls.DATE_FORMAT)

    @classmethod
    def parse_time(cls, time_str: str) -> Optional[time]:
        """
        Parse a time string in HH:MM format to a time object.

        Args:
            time_str: String in HH:MM format

        Returns:
            Time object or None if parsing fails
        """
        if not time_str or not re.match(r'^([01]\d|2[0-3]):([0-5]\d)$', time_str):
            return None
        return datetime.strptime(time_str, cls.TIME_FORMAT).time()

    @classmethod
    def get_current_datetime(cls) -> datetime:
        """
        Get the current UTC datetime.

        Returns:
            Current timezone-aware UTC datetime
        """
        return datetime.now(timezone.utc)

    @classmethod
    def get_current_date(cls) -> date:
        """
        Get the current UTC date.

        Returns:
            Current UTC date
        """
        return cls.get_current_datetime().date()

    @classmethod
    def to_iso(cls, dt: datetime) -> str:
        """
        Format a datetime as an ISO-8601 UTC string with a trailing Z.

        Args:
            dt: Datetime, naive values are taken to be UTC

        Returns:
            ISO-8601 string
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        dt = dt.astimezone(timezone.utc)
        return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @classmethod
    def parse_iso(cls, value: str) -> datetime:
        """
        Parse an ISO-8601 timestamp written by to_iso or a browser.

        Args:
            value: ISO-8601 string, optionally ending in Z

        Returns:
            Timezone-aware datetime
        """
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        dt = datetime.fromisoformat(value)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt

    @classmethod
    def hours_between(cls, start: datetime, end: datetime) -> float:
        return (end - start).total_seconds() / 3600

    @classmethod
    def day_of_week(cls, date_obj: date) -> int:
        """
        Weekday number with Sunday as 0 and Saturday as 6.

        Args:
            date_obj: Date

        Returns:
            Weekday number 0-6
        """
        return (date_obj.weekday() + 1) % 7

    @classmethod
    def iter_dates(cls, start: date, end: date) -> Iterator[date]:
        """
        Yield every date from start to end, both inclusive.
        Yields nothing when start is after end.
        """
        current = start
        while current <= end:
            yield current
            current += timedelta(days=1)
