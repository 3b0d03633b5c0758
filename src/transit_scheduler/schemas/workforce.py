"""
Workforce schemas for assigning scheduled departures to workers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from src.transit_scheduler.exceptions import InvalidConfigurationError
from src.transit_scheduler.schemas.schedule import Departure, Shift


@dataclass(frozen=True)
class Worker:
    """A driver available for one shift."""

    id: str
    name: str
    shift: Shift

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidConfigurationError("worker.id", "Worker id cannot be empty")
        if not isinstance(self.shift, Shift):
            raise InvalidConfigurationError(
                "worker.shift", f"Unknown shift for worker '{self.id}': {self.shift!r}"
            )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Worker":
        """Build a Worker from a stored row (id, name, shift)."""
        try:
            shift = Shift(record.get("shift"))
        except ValueError as e:
            raise InvalidConfigurationError(
                "worker.shift",
                f"Unknown shift for worker '{record.get('id')}': {record.get('shift')!r}",
            ) from e
        return cls(id=str(record.get("id")), name=record.get("name") or "", shift=shift)


@dataclass(frozen=True)
class WorkerAssignment:
    """One departure handed to one worker."""

    worker_id: str
    route_id: str
    start_time: str
    end_time: str
    duration_minutes: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "route_id": self.route_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration_minutes,
        }


@dataclass(frozen=True)
class AssignmentResult:
    """
    Outcome of distributing departures over workers.

    Attributes:
        assignments: Worker id -> assignments in the order given out.
            Every worker appears, possibly with no assignments.
        unassigned: Departures whose shift had no workers.
    """

    assignments: Mapping[str, Tuple[WorkerAssignment, ...]]
    unassigned: Tuple[Departure, ...] = field(default_factory=tuple)

    def minutes_for(self, worker_id: str) -> int:
        """Total assigned minutes for a worker."""
        return sum(a.duration_minutes for a in self.assignments.get(worker_id, ()))

    @property
    def assigned_count(self) -> int:
        return sum(len(items) for items in self.assignments.values())

    def as_schedule_documents(self) -> Dict[str, List[Dict[str, Any]]]:
        """Worker id -> list of assignment dicts, as stored per worker."""
        return {
            worker_id: [a.to_dict() for a in items]
            for worker_id, items in self.assignments.items()
        }


@dataclass(frozen=True)
class AssignmentSummary:
    """Coverage figures for a set of departures and workers."""

    total_departures: int
    total_workers: int
    workers_needed: int
    departures_per_worker: int

    @property
    def is_sufficiently_staffed(self) -> bool:
        return self.total_workers >= self.workers_needed
