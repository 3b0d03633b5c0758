"""
Transit Data Store port interface.

Defines the abstract contract for the backend that supplies the route
catalog and stores generated schedules and worker assignments.
Implementations handle the specifics of the backend (SQLite, hosted
REST database, in-memory).
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from src.transit_scheduler.schemas.route import Route
from src.transit_scheduler.schemas.schedule import ScheduleRecord
from src.transit_scheduler.schemas.workforce import AssignmentResult, Worker


class TransitDataStore(ABC):
    """
    Abstract interface for transit data stores.

    The scheduling core never talks to a backend directly; callers
    fetch routes through this port, run the pure services, and hand
    the results back for storage.

    Implementations:
    - InMemoryTransitDataStore: dictionaries, for tests and demos
    - SQLiteTransitDataStore: local SQLite file via pandas
    - SupabaseTransitDataStore: hosted PostgREST API over httpx
    """

    @abstractmethod
    def list_routes(self) -> List[Route]:
        """
        Return the route catalog.

        Returns:
            Routes in a stable order (by name, then id).

        Raises:
            MissingTripDurationError: If a stored route has no duration.
            DataStoreError: If the backend is unavailable.
        """
        ...

    @abstractmethod
    def save_schedules(self, records: Sequence[ScheduleRecord]) -> None:
        """
        Replace every stored schedule with the given records.

        Records are keyed by route id. Previously stored schedules for
        routes not in records are removed.

        Raises:
            DataStoreError: If the backend write fails.
        """
        ...

    @abstractmethod
    def load_schedules(self) -> List[ScheduleRecord]:
        """
        Return the stored schedules.

        Raises:
            DataStoreError: If the backend read fails or a stored
                document is malformed.
        """
        ...

    @abstractmethod
    def list_workers(self) -> List[Worker]:
        """Return all workers."""
        ...

    @abstractmethod
    def save_worker_assignments(self, result: AssignmentResult) -> None:
        """
        Store each worker's assignments, replacing previous ones.

        Raises:
            DataStoreError: If the backend write fails.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Human-readable name of this data store.

        Returns:
            Store identifier (e.g., "SQLite", "Supabase").
        """
        ...

    @property
    def is_available(self) -> bool:
        """
        Check if the backend is currently reachable.

        Default implementation returns True. Override for stores that
        need connection health checks.
        """
        return True

    def close(self) -> None:
        """Release backend resources. No-op by default."""
        return None
