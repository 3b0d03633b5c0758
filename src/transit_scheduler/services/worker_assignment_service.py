"""
Worker Assignment - distribute scheduled departures over drivers.

Departures are handed out per shift in operating-day order, each to the
worker of that shift with the fewest assigned minutes so far.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Dict, List, Sequence

from src.transit_scheduler.clock import clock_to_minutes
from src.transit_scheduler.schemas.schedule import Departure, Shift
from src.transit_scheduler.schemas.workforce import (
    AssignmentResult,
    AssignmentSummary,
    Worker,
    WorkerAssignment,
)
from src.transit_scheduler.validation import validate_hour, validate_positive_int

logger = logging.getLogger(__name__)

# Departures one worker is expected to cover in a shift
DEPARTURES_PER_WORKER_TARGET = 8


def _operating_day_minutes(departure: Departure, work_start_hour: int) -> int:
    """Minutes since midnight of the opening day, post-midnight trips last."""
    minutes = clock_to_minutes(departure.start_time, "departure")
    if minutes < work_start_hour * 60:
        minutes += 24 * 60
    return minutes


def assign_departures(
    departures: Sequence[Departure],
    workers: Sequence[Worker],
    work_start_hour: int = 0,
) -> AssignmentResult:
    """
    Assign every departure to a worker of the same shift.

    Within a shift, departures go out in operating-day order; each goes
    to the least-loaded worker (by assigned minutes). On a tie the
    earliest tied worker in the input wins, never the last one, so
    callers control precedence through list order. Departures of a
    shift without workers are returned as unassigned.

    Args:
        departures: Departures to cover.
        workers: Available workers.
        work_start_hour: Opening hour, used to order post-midnight
            departures after the evening ones.

    Returns:
        AssignmentResult covering every input worker.
    """
    work_start_hour = validate_hour(work_start_hour, "work_start_hour")

    workers_by_shift: Dict[Shift, List[Worker]] = defaultdict(list)
    for worker in workers:
        workers_by_shift[worker.shift].append(worker)

    departures_by_shift: Dict[Shift, List[Departure]] = defaultdict(list)
    for departure in departures:
        departures_by_shift[departure.shift].append(departure)

    assignments: Dict[str, List[WorkerAssignment]] = {w.id: [] for w in workers}
    load: Dict[str, int] = {w.id: 0 for w in workers}
    unassigned: List[Departure] = []

    for shift in Shift:
        shift_departures = departures_by_shift.get(shift, [])
        if not shift_departures:
            continue

        available = workers_by_shift.get(shift, [])
        if not available:
            logger.warning(
                "No workers available for %s shift, %d departures left unassigned",
                shift.value,
                len(shift_departures),
            )
            unassigned.extend(shift_departures)
            continue

        ordered = sorted(
            shift_departures,
            key=lambda d: _operating_day_minutes(d, work_start_hour),
        )
        for departure in ordered:
            worker = min(available, key=lambda w: load[w.id])
            assignments[worker.id].append(
                WorkerAssignment(
                    worker_id=worker.id,
                    route_id=departure.route_id,
                    start_time=departure.start_time,
                    end_time=departure.end_time,
                    duration_minutes=departure.duration_minutes,
                )
            )
            load[worker.id] += departure.duration_minutes

        logger.debug(
            "Assigned %d %s departures over %d workers",
            len(ordered),
            shift.value,
            len(available),
        )

    return AssignmentResult(
        assignments={worker_id: tuple(items) for worker_id, items in assignments.items()},
        unassigned=tuple(unassigned),
    )


def summarize_assignment(
    total_departures: int,
    total_workers: int,
    departures_per_worker_target: int = DEPARTURES_PER_WORKER_TARGET,
) -> AssignmentSummary:
    """
    Coverage figures for a departure count and a workforce size.

    Examples:
        >>> summarize_assignment(20, 2).workers_needed
        3
    """
    target = validate_positive_int(departures_per_worker_target, "departures_per_worker_target")
    return AssignmentSummary(
        total_departures=total_departures,
        total_workers=total_workers,
        workers_needed=math.ceil(total_departures / target),
        departures_per_worker=(
            math.ceil(total_departures / total_workers) if total_workers > 0 else 0
        ),
    )
