"""
Schedule Generator - departure synthesis for one operating day.

Walks a simulation clock from opening to closing time. At every tick,
each route whose next eligible departure has come up departs, and its
next eligible time is pushed out by the route's adjusted frequency.
Peak windows shrink both the clock step and the route frequencies.
"""

from __future__ import annotations

import logging
import math
import time
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence

from src.transit_scheduler.clock import (
    REFERENCE_DATE,
    anchor_operating_window,
    format_clock_time,
    round_half_up,
)
from src.transit_scheduler.schemas.route import Route
from src.transit_scheduler.schemas.schedule import (
    DEFAULT_INTERVAL_MINUTES,
    PeakWindow,
    ScheduleEntry,
)
from src.transit_scheduler.validation import (
    MAX_PRIORITY,
    MIN_PRIORITY,
    clamp_priority,
    validate_positive_int,
    validate_unique_route_ids,
)

logger = logging.getLogger(__name__)

# Base frequency at the lowest and highest priority (minutes)
LOWEST_PRIORITY_FREQUENCY = 40
HIGHEST_PRIORITY_FREQUENCY = 10

# Frequency multiplier while inside a peak window
PEAK_FACTOR = 0.7

# No route departs more often than this, peak or not
MIN_FREQUENCY_MINUTES = 10


def calculate_base_frequency(priority: object) -> int:
    """
    Map a route priority to its nominal minutes between departures.

    Priority is clamped to [1, 10] first (absent or invalid priority
    counts as 5), then mapped linearly from 40 minutes at priority 1
    to 10 minutes at priority 10 and rounded to the nearest minute.

    Examples:
        >>> calculate_base_frequency(1)
        40
        >>> calculate_base_frequency(10)
        10
        >>> calculate_base_frequency(None)
        27
    """
    priority = clamp_priority(priority)
    span = LOWEST_PRIORITY_FREQUENCY - HIGHEST_PRIORITY_FREQUENCY
    raw = LOWEST_PRIORITY_FREQUENCY - (
        (priority - MIN_PRIORITY) / (MAX_PRIORITY - MIN_PRIORITY)
    ) * span
    return round_half_up(raw)


def calculate_adjusted_frequency(base_frequency: int, in_peak: bool) -> int:
    """Frequency actually used to schedule the next departure."""
    factor = PEAK_FACTOR if in_peak else 1.0
    return max(MIN_FREQUENCY_MINUTES, math.floor(base_frequency * factor))


def find_peak_window(
    hour: int,
    peak_windows: Sequence[PeakWindow],
) -> Optional[PeakWindow]:
    """Return the first window containing the hour, or None."""
    for window in peak_windows:
        if window.contains(hour):
            return window
    return None


def generate_schedules(
    routes: Sequence[Route],
    work_start: str,
    work_end: str,
    peak_windows: Sequence[PeakWindow] = (),
    default_interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
    reference_date: date = REFERENCE_DATE,
) -> List[ScheduleEntry]:
    """
    Generate one operating day of departures for every route.

    Args:
        routes: Route catalog. May be empty.
        work_start: Opening time "HH:MM".
        work_end: Closing time "HH:MM". At or before work_start means
            the next calendar day.
        peak_windows: Ordered peak windows; the first containing the
            clock hour applies.
        default_interval_minutes: Clock step outside peak windows.
        reference_date: Date anchoring work_start. Only affects where
            the simulated day sits on the calendar, never the output.

    Returns:
        One ScheduleEntry per route, in catalog order.

    Raises:
        InvalidTimeFormatError: If work_start or work_end is malformed.
        InvalidConfigurationError: If default_interval_minutes is not a
            positive integer.
        InvalidRouteError: If two routes share an id.
    """
    validate_positive_int(default_interval_minutes, "default_interval_minutes")
    start, end = anchor_operating_window(work_start, work_end, reference_date)
    validate_unique_route_ids(route.id for route in routes)

    if not routes:
        logger.debug("Empty route catalog, nothing to schedule")
        return []

    run_start = time.perf_counter()
    peak_windows = tuple(peak_windows)
    default_step = timedelta(minutes=default_interval_minutes)

    base_frequencies = [calculate_base_frequency(r.priority) for r in routes]
    next_departure: List[datetime] = [start] * len(routes)
    departures: List[List[str]] = [[] for _ in routes]

    clock = start
    ticks = 0
    while clock < end:
        peak = find_peak_window(clock.hour, peak_windows)
        slot = format_clock_time(clock)

        for index, base in enumerate(base_frequencies):
            if clock >= next_departure[index]:
                departures[index].append(slot)
                adjusted = calculate_adjusted_frequency(base, peak is not None)
                next_departure[index] = clock + timedelta(minutes=adjusted)

        if peak is not None:
            clock += timedelta(minutes=peak.sampling_step_minutes)
        else:
            clock += default_step
        ticks += 1

    entries = [
        ScheduleEntry(
            route_id=route.id,
            departures=tuple(route_departures),
            frequency_minutes=base,
        )
        for route, route_departures, base in zip(routes, departures, base_frequencies)
    ]

    logger.info(
        "Generated %d departures for %d routes in %.3fms (%d clock ticks, %s-%s)",
        sum(len(d) for d in departures),
        len(routes),
        (time.perf_counter() - run_start) * 1000,
        ticks,
        work_start,
        work_end,
    )
    return entries


def build_frequency_table(routes: Sequence[Route]) -> Dict[str, int]:
    """Route id -> base frequency, for display next to a catalog."""
    return {route.id: calculate_base_frequency(route.priority) for route in routes}
