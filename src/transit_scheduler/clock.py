"""
Wall-clock helpers for the transit scheduler.

Departure times travel through the system as zero-padded 24-hour
"HH:MM" strings. These helpers are the single place where such
strings are parsed and produced.
"""

import math
import re
from datetime import date, datetime, time, timedelta
from typing import Any, Tuple

from src.transit_scheduler.exceptions import InvalidTimeFormatError

MINUTES_PER_DAY = 24 * 60

# Calendar date that anchors an operating day when the caller gives none.
# Fixed so that generation never depends on the system clock.
REFERENCE_DATE = date(2024, 1, 1)

_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_clock_time(value: Any, field_name: str = "time") -> Tuple[int, int]:
    """
    Parse a 24-hour "HH:MM" string into (hour, minute).

    Args:
        value: String to parse, e.g. "06:00" or "1:05".
        field_name: Name reported in the error if parsing fails.

    Returns:
        Tuple of (hour, minute).

    Raises:
        InvalidTimeFormatError: If value is not a string or is out of range.

    Examples:
        >>> parse_clock_time("06:30")
        (6, 30)
    """
    if not isinstance(value, str):
        raise InvalidTimeFormatError(value, field_name)

    match = _CLOCK_PATTERN.match(value.strip())
    if match is None:
        raise InvalidTimeFormatError(value, field_name)

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidTimeFormatError(value, field_name)
    return hour, minute


def format_clock_time(moment: datetime) -> str:
    """Format a datetime as zero-padded "HH:MM"."""
    return f"{moment.hour:02d}:{moment.minute:02d}"


def clock_to_minutes(value: str, field_name: str = "time") -> int:
    """Convert "HH:MM" to minutes after midnight."""
    hour, minute = parse_clock_time(value, field_name)
    return hour * 60 + minute


def add_minutes(value: str, minutes: int) -> str:
    """
    Add minutes to a clock time, wrapping past midnight.

    Examples:
        >>> add_minutes("23:40", 45)
        '00:25'
    """
    total = (clock_to_minutes(value) + minutes) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def anchor_operating_window(
    work_start: str,
    work_end: str,
    reference_date: date = REFERENCE_DATE,
) -> Tuple[datetime, datetime]:
    """
    Anchor an operating window onto concrete datetimes.

    If work_end is at or before work_start it is moved to the next
    calendar day, so "06:00" to "01:00" covers 19 hours and equal
    bounds cover a full day.

    Args:
        work_start: Opening time "HH:MM".
        work_end: Closing time "HH:MM".
        reference_date: Calendar date of the opening time.

    Returns:
        Tuple of (start, end) datetimes with start < end.
    """
    start_hour, start_minute = parse_clock_time(work_start, "work_start")
    end_hour, end_minute = parse_clock_time(work_end, "work_end")

    start = datetime.combine(reference_date, time(start_hour, start_minute))
    end = datetime.combine(reference_date, time(end_hour, end_minute))
    if end <= start:
        end += timedelta(days=1)
    return start, end


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))
