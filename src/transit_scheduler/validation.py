"""
Input validation for the transit scheduler.

Provides validation functions that check inputs before any scheduling
work begins, ensuring fail-fast behavior with clear error messages.
Priority is the one field with a sanctioned default-and-clamp path;
everything else is rejected rather than coerced.
"""

import math
import numbers
from typing import Any, Iterable, Optional

from .exceptions import (
    InvalidConfigurationError,
    InvalidRouteError,
    MissingTripDurationError,
)

DEFAULT_PRIORITY = 5.0
MIN_PRIORITY = 1.0
MAX_PRIORITY = 10.0


def _is_number(value: Any) -> bool:
    """True for real ints and floats (bool excluded), finite only."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def _is_integral(value: Any) -> bool:
    return _is_number(value) and float(value).is_integer()


def validate_hour(
    value: Any,
    field_name: str,
    min_value: int = 0,
    max_value: int = 23,
) -> int:
    """
    Validate an integer hour-of-day bound.

    Args:
        value: Hour to validate.
        field_name: Name reported in the error.
        min_value: Inclusive lower bound.
        max_value: Inclusive upper bound.

    Returns:
        The hour as int.

    Raises:
        InvalidConfigurationError: If value is not an integer in range.
    """
    if not _is_integral(value):
        raise InvalidConfigurationError(
            field_name, f"{field_name} must be an integer hour, got {value!r}"
        )
    if not min_value <= value <= max_value:
        raise InvalidConfigurationError(
            field_name,
            f"{field_name} must be between {min_value} and {max_value}, got {value}",
        )
    return int(value)


def validate_shift_hour(value: Any, field_name: str) -> float:
    """
    Validate a shift boundary hour.

    Shift hours may exceed 24 to express times after midnight
    (25 means 01:00 the next day), so only numeric and
    non-negative are required.
    """
    if not _is_number(value):
        raise InvalidConfigurationError(
            field_name, f"{field_name} must be numeric, got {value!r}"
        )
    if value < 0:
        raise InvalidConfigurationError(
            field_name, f"{field_name} must be >= 0, got {value}"
        )
    return value


def validate_positive_number(value: Any, field_name: str) -> float:
    """Validate a strictly positive finite number."""
    if not _is_number(value) or value <= 0:
        raise InvalidConfigurationError(
            field_name, f"{field_name} must be a positive number, got {value!r}"
        )
    return value


def validate_positive_int(value: Any, field_name: str, min_value: int = 1) -> int:
    """Validate an integer that is at least min_value."""
    if not _is_integral(value) or value < min_value:
        raise InvalidConfigurationError(
            field_name,
            f"{field_name} must be an integer >= {min_value}, got {value!r}",
        )
    return int(value)


def normalize_priority(value: Any) -> float:
    """
    Return a usable priority, defaulting absent or invalid values.

    None, zero, non-numeric values and NaN become DEFAULT_PRIORITY.
    Numeric strings (as stored by some backends) are accepted. The
    result is not clamped; see clamp_priority.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_PRIORITY
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return DEFAULT_PRIORITY
    if not _is_number(value):
        return DEFAULT_PRIORITY
    # an unrated route is stored as 0
    if value == 0:
        return DEFAULT_PRIORITY
    return float(value)


def clamp_priority(value: Any) -> float:
    """Normalize a priority and clamp it into [MIN_PRIORITY, MAX_PRIORITY]."""
    return max(MIN_PRIORITY, min(MAX_PRIORITY, normalize_priority(value)))


def validate_trip_duration(route_id: Any, value: Optional[Any]) -> int:
    """
    Validate a route's estimated trip duration in minutes.

    Raises:
        MissingTripDurationError: If value is None or NaN.
        InvalidRouteError: If value is not a positive integer.
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        raise MissingTripDurationError(route_id)
    if not _is_integral(value) or value <= 0:
        raise InvalidRouteError(
            route_id,
            f"Route '{route_id}' estimated time must be a positive integer "
            f"number of minutes, got {value!r}",
        )
    return int(value)


def validate_unique_route_ids(route_ids: Iterable[str]) -> None:
    """
    Validate that no route id appears twice in a catalog.

    Raises:
        InvalidRouteError: On the first duplicate id found.
    """
    seen = set()
    for route_id in route_ids:
        if route_id in seen:
            raise InvalidRouteError(
                route_id, f"Duplicate route id '{route_id}' in catalog"
            )
        seen.add(route_id)
