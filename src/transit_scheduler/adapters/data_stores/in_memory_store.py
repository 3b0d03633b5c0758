"""
In-memory Transit Data Store.

Keeps routes, schedules and workers in plain dictionaries. Used by
tests, the demo catalog and callers that manage persistence themselves.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from src.transit_scheduler.ports.transit_data_store import TransitDataStore
from src.transit_scheduler.schemas.route import Route
from src.transit_scheduler.schemas.schedule import ScheduleRecord
from src.transit_scheduler.schemas.workforce import (
    AssignmentResult,
    Worker,
    WorkerAssignment,
)
from src.transit_scheduler.validation import validate_unique_route_ids

logger = logging.getLogger(__name__)

# Sample catalog used when no backend is configured
DEMO_ROUTES: Tuple[Route, ...] = (
    Route(id="1", name="Downtown Loop", estimated_time=45, priority=8),
    Route(id="2", name="Airport Express", estimated_time=30, priority=9),
    Route(id="3", name="Suburb Connector", estimated_time=60, priority=5),
)


class InMemoryTransitDataStore(TransitDataStore):
    """
    Dictionary-backed data store.

    Attributes:
        _routes: Route catalog in insertion order.
        _schedules: Route id -> stored record.
        _workers: Worker catalog in insertion order.
        _worker_schedules: Worker id -> stored assignments.
    """

    def __init__(
        self,
        routes: Optional[Iterable[Route]] = None,
        workers: Optional[Iterable[Worker]] = None,
    ) -> None:
        self._routes: List[Route] = list(routes or [])
        validate_unique_route_ids(r.id for r in self._routes)
        self._schedules: Dict[str, ScheduleRecord] = {}
        self._workers: List[Worker] = list(workers or [])
        self._worker_schedules: Dict[str, Tuple[WorkerAssignment, ...]] = {}

    @classmethod
    def with_demo_routes(cls) -> "InMemoryTransitDataStore":
        """Store pre-filled with the demo route catalog."""
        return cls(routes=DEMO_ROUTES)

    def list_routes(self) -> List[Route]:
        return sorted(self._routes, key=lambda r: (r.name, r.id))

    def save_schedules(self, records: Sequence[ScheduleRecord]) -> None:
        self._schedules = {record.route_id: record for record in records}
        logger.debug("Stored %d schedules in memory", len(self._schedules))

    def load_schedules(self) -> List[ScheduleRecord]:
        return list(self._schedules.values())

    def list_workers(self) -> List[Worker]:
        return list(self._workers)

    def save_worker_assignments(self, result: AssignmentResult) -> None:
        self._worker_schedules.update(result.assignments)

    def worker_schedule(self, worker_id: str) -> Tuple[WorkerAssignment, ...]:
        """Stored assignments for one worker."""
        return self._worker_schedules.get(worker_id, ())

    @property
    def name(self) -> str:
        return "In-Memory Store"
