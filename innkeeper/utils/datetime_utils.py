"""
Date and time helpers for day-granularity booking.
"""

import math
from datetime import date, datetime, timedelta
from typing import Union

import pytz
from dateutil import parser

DateLike = Union[date, datetime, str]


class DateTimeHelper:
    """Date parsing and normalization used by availability and pricing"""

    @staticmethod
    def today(timezone: str = 'UTC') -> date:
        """Get current date in specified timezone"""
        return datetime.now(pytz.timezone(timezone)).date()

    @staticmethod
    def to_date(value: DateLike) -> date:
        """
        Normalize a date, datetime or string to a calendar day (midnight).

        Raises:
            ValueError: if the value cannot be parsed
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str) and value.strip():
            try:
                return parser.isoparse(value.strip()).date()
            except ValueError:
                return parser.parse(value.strip()).date()
        raise ValueError(f"Unable to parse date: {value!r}")

    @staticmethod
    def nights_between(check_in: date, check_out: date) -> int:
        """Ceiling of the calendar-day difference between two days."""
        delta: timedelta = check_out - check_in
        return math.ceil(delta.total_seconds() / 86400)
