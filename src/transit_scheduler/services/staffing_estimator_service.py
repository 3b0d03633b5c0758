"""
Staffing Estimator - minimum headcount per shift.

Sums the trip minutes generated by a day of schedules into a morning
and an evening bucket and converts each bucket into a headcount. Also
expands schedules into per-departure rows (end time, shift) for
storage and display.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Mapping, Sequence

import pandas as pd

from src.transit_scheduler.clock import add_minutes, parse_clock_time
from src.transit_scheduler.exceptions import (
    InvalidConfigurationError,
    MissingTripDurationError,
)
from src.transit_scheduler.schemas.route import Route
from src.transit_scheduler.schemas.schedule import (
    Departure,
    DepartureSchema,
    ScheduleEntry,
    ScheduleRecord,
    Shift,
    ShiftWindow,
    StaffingResult,
)
from src.transit_scheduler.validation import (
    validate_hour,
    validate_positive_number,
    validate_trip_duration,
)

logger = logging.getLogger(__name__)

# Employees are planned at 90% utilization
UTILIZATION_FACTOR = 0.9


def normalize_departure_hour(departure_time: str, work_start_hour: int) -> int:
    """
    Place a departure's hour on the continuous operating-day axis.

    Hours before the opening hour belong to the next calendar day and
    are shifted by 24, so 00:30 in a day opening at 06:00 becomes 24.
    """
    hour, _ = parse_clock_time(departure_time, "departure")
    if hour < work_start_hour:
        hour += 24
    return hour


def classify_departure(
    departure_time: str,
    work_start_hour: int,
    morning_shift: ShiftWindow,
) -> Shift:
    """
    Assign a departure to the morning or evening shift.

    Morning is an explicit window check; evening is the catch-all for
    everything else. The evening window's own bounds are never
    consulted, so gaps or overlaps between the two windows resolve
    to evening.
    """
    hour = normalize_departure_hour(departure_time, work_start_hour)
    if morning_shift.contains(hour):
        return Shift.MORNING
    return Shift.EVENING


def _lookup_duration(trip_durations: Mapping[str, int], route_id: str) -> int:
    if route_id not in trip_durations:
        raise MissingTripDurationError(route_id)
    return validate_trip_duration(route_id, trip_durations[route_id])


def estimate_staffing(
    entries: Sequence[ScheduleEntry],
    trip_durations: Mapping[str, int],
    work_start_hour: int,
    morning_shift: ShiftWindow,
    evening_shift: ShiftWindow,
    required_work_minutes_per_employee: float,
) -> StaffingResult:
    """
    Derive the minimum staff for each shift from generated schedules.

    Every departure contributes its route's trip duration to the shift
    it is classified into. Headcount is the shift's minutes divided by
    90% of the required work minutes per employee, rounded up.

    Args:
        entries: Schedules to staff.
        trip_durations: Route id -> estimated trip minutes.
        work_start_hour: Opening hour of the operating day (0-23).
        morning_shift: Morning shift window.
        evening_shift: Evening shift window. Validated, not used for
            classification.
        required_work_minutes_per_employee: Minutes one employee covers.

    Returns:
        StaffingResult with headcounts and minute totals.

    Raises:
        InvalidConfigurationError: If work_start_hour or the required
            minutes are invalid, or a shift is not a ShiftWindow.
        MissingTripDurationError: If a scheduled route has no duration.
        InvalidTimeFormatError: If a departure is not "HH:MM".
    """
    work_start_hour = validate_hour(work_start_hour, "work_start_hour")
    required = validate_positive_number(
        required_work_minutes_per_employee, "required_work_minutes_per_employee"
    )
    for name, shift in (("morning_shift", morning_shift), ("evening_shift", evening_shift)):
        if not isinstance(shift, ShiftWindow):
            raise InvalidConfigurationError(name, f"{name} must be a ShiftWindow")

    morning_minutes = 0
    evening_minutes = 0
    for entry in entries:
        if not entry.departures:
            continue
        duration = _lookup_duration(trip_durations, entry.route_id)
        for departure_time in entry.departures:
            if classify_departure(departure_time, work_start_hour, morning_shift) is Shift.MORNING:
                morning_minutes += duration
            else:
                evening_minutes += duration

    adjusted = required * UTILIZATION_FACTOR
    result = StaffingResult(
        morning_staff=math.ceil(morning_minutes / adjusted),
        evening_staff=math.ceil(evening_minutes / adjusted),
        morning_minutes=morning_minutes,
        evening_minutes=evening_minutes,
    )

    logger.info(
        "Staffing estimate: morning=%d (%d min), evening=%d (%d min)",
        result.morning_staff,
        result.morning_minutes,
        result.evening_staff,
        result.evening_minutes,
    )
    return result


def trip_durations_for(routes: Iterable[Route]) -> dict:
    """Route id -> estimated trip minutes."""
    return {route.id: route.estimated_time for route in routes}


def expand_departures(
    entry: ScheduleEntry,
    estimated_time: int,
    work_start_hour: int,
    morning_shift: ShiftWindow,
) -> List[Departure]:
    """
    Expand a schedule entry into per-trip rows.

    End time is the departure plus the trip duration, wrapping past
    midnight.
    """
    estimated_time = validate_trip_duration(entry.route_id, estimated_time)
    return [
        Departure(
            route_id=entry.route_id,
            start_time=departure_time,
            end_time=add_minutes(departure_time, estimated_time),
            duration_minutes=estimated_time,
            shift=classify_departure(departure_time, work_start_hour, morning_shift),
        )
        for departure_time in entry.departures
    ]


def departures_to_frame(departures: Iterable[Departure]) -> pd.DataFrame:
    """
    Tabulate departures as a DepartureSchema-validated DataFrame.

    Returns:
        DataFrame with columns route_id, start_time, end_time,
        duration_minutes, shift (empty, with those columns, if no rows).
    """
    columns = list(DepartureSchema.to_schema().columns)
    rows = [d.to_dict() for d in departures]
    df = pd.DataFrame(rows, columns=columns)
    return DepartureSchema.validate(df)


def build_schedule_records(
    entries: Sequence[ScheduleEntry],
    routes: Sequence[Route],
    staffing: StaffingResult,
    work_start_hour: int,
    morning_shift: ShiftWindow,
) -> List[ScheduleRecord]:
    """
    Combine entries, route metadata and staffing into storable records.

    Raises:
        MissingTripDurationError: If an entry's route is not in routes.
    """
    routes_by_id = {route.id: route for route in routes}
    records = []
    for entry in entries:
        route = routes_by_id.get(entry.route_id)
        if route is None:
            raise MissingTripDurationError(entry.route_id)
        records.append(
            ScheduleRecord(
                route_id=entry.route_id,
                display_name=route.display_name,
                priority=route.priority,
                estimated_time=route.estimated_time,
                frequency_minutes=entry.frequency_minutes,
                departures=tuple(
                    expand_departures(
                        entry, route.estimated_time, work_start_hour, morning_shift
                    )
                ),
                morning_staff=staffing.morning_staff,
                evening_staff=staffing.evening_staff,
            )
        )
    return records
