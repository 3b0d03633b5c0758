"""
Custom exceptions for the transit scheduler.

Provides a hierarchy of exceptions for clear error handling
and debugging of schedule generation and staffing operations.
"""

from typing import Any


class SchedulerError(Exception):
    """Base exception for all transit scheduler errors."""

    pass


class InvalidConfigurationError(SchedulerError):
    """Raised when schedule configuration values are invalid."""

    def __init__(self, field_name: str, message: str = "") -> None:
        self.field_name = field_name
        message = message or f"Invalid configuration value for '{field_name}'"
        super().__init__(message)


class InvalidTimeFormatError(InvalidConfigurationError):
    """Raised when a wall-clock string is not a valid 24-hour HH:MM time."""

    def __init__(self, value: Any, field_name: str = "time") -> None:
        self.value = value
        message = f"Invalid time for '{field_name}': {value!r} (expected HH:MM)"
        super().__init__(field_name, message)


class InvalidRouteError(SchedulerError):
    """Raised when a route in the catalog carries unusable data."""

    def __init__(self, route_id: Any, message: str = "") -> None:
        self.route_id = route_id
        message = message or f"Route '{route_id}' is invalid"
        super().__init__(message)


class MissingTripDurationError(InvalidRouteError):
    """Raised when a route has no estimated trip duration."""

    def __init__(self, route_id: Any) -> None:
        super().__init__(
            route_id,
            f"Route '{route_id}' has no estimated trip duration",
        )


class DataStoreError(SchedulerError):
    """Raised when the backing data store cannot be read or written."""

    def __init__(self, store_name: str, message: str = "") -> None:
        self.store_name = store_name
        message = message or f"Data store '{store_name}' operation failed"
        super().__init__(f"{store_name}: {message}")
