"""
Domain services for the Transit Scheduler.

Pure functions over already-validated in-memory data: departure
generation, staffing estimation and worker assignment.
"""

from src.transit_scheduler.services.schedule_generator_service import (
    calculate_adjusted_frequency,
    calculate_base_frequency,
    find_peak_window,
    generate_schedules,
)
from src.transit_scheduler.services.staffing_estimator_service import (
    build_schedule_records,
    classify_departure,
    departures_to_frame,
    estimate_staffing,
    expand_departures,
    normalize_departure_hour,
)
from src.transit_scheduler.services.worker_assignment_service import (
    assign_departures,
    summarize_assignment,
)

__all__ = [
    "calculate_adjusted_frequency",
    "calculate_base_frequency",
    "find_peak_window",
    "generate_schedules",
    "build_schedule_records",
    "classify_departure",
    "departures_to_frame",
    "estimate_staffing",
    "expand_departures",
    "normalize_departure_hour",
    "assign_departures",
    "summarize_assignment",
]
