"""
Schema definitions for the Transit Scheduler.

Immutable dataclasses as the in-memory contracts, Pandera-validated
DataFrames at the storage and export boundaries.
"""

from .route import Route, RouteCatalogSchema
from .schedule import (
    DEFAULT_EVENING_SHIFT,
    DEFAULT_MORNING_SHIFT,
    DEFAULT_PEAK_WINDOWS,
    Departure,
    DepartureSchema,
    PeakWindow,
    ScheduleConfig,
    ScheduleEntry,
    ScheduleRecord,
    Shift,
    ShiftWindow,
    StaffingResult,
)
from .workforce import (
    AssignmentResult,
    AssignmentSummary,
    Worker,
    WorkerAssignment,
)

__all__ = [
    # Route catalog
    "Route",
    "RouteCatalogSchema",
    # Configuration
    "PeakWindow",
    "ShiftWindow",
    "ScheduleConfig",
    "DEFAULT_PEAK_WINDOWS",
    "DEFAULT_MORNING_SHIFT",
    "DEFAULT_EVENING_SHIFT",
    # Schedules
    "Shift",
    "ScheduleEntry",
    "Departure",
    "DepartureSchema",
    "ScheduleRecord",
    "StaffingResult",
    # Workforce
    "Worker",
    "WorkerAssignment",
    "AssignmentResult",
    "AssignmentSummary",
]
