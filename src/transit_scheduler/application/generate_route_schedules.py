"""
GenerateRouteSchedules Use Case - Public API for schedule generation.

This module provides the main entry point for the transit scheduler.
It acts as a Facade/Factory, handling data store initialization and
threading a ScheduleConfig through the pure generation, staffing and
assignment services.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from src.transit_scheduler.adapters.data_stores.in_memory_store import (
    InMemoryTransitDataStore,
)
from src.transit_scheduler.adapters.data_stores.sqlite_store import (
    SQLiteTransitDataStore,
)
from src.transit_scheduler.adapters.data_stores.supabase_store import (
    SupabaseTransitDataStore,
)
from src.transit_scheduler.config import Config
from src.transit_scheduler.exceptions import InvalidConfigurationError
from src.transit_scheduler.ports.transit_data_store import TransitDataStore
from src.transit_scheduler.schemas.route import Route
from src.transit_scheduler.schemas.schedule import (
    Departure,
    ScheduleConfig,
    ScheduleEntry,
    ScheduleRecord,
    StaffingResult,
)
from src.transit_scheduler.schemas.workforce import AssignmentResult
from src.transit_scheduler.services.schedule_generator_service import (
    generate_schedules,
)
from src.transit_scheduler.services.staffing_estimator_service import (
    build_schedule_records,
    estimate_staffing,
    trip_durations_for,
)
from src.transit_scheduler.services.worker_assignment_service import (
    assign_departures,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleRun:
    """
    Everything one generation run produced.

    Attributes:
        config: Settings the run used.
        routes: Catalog the run scheduled.
        entries: One schedule entry per route.
        staffing: Headcount derived from the entries.
        records: Entries joined with route metadata and staffing, as
            handed to the data store.
    """

    config: ScheduleConfig
    routes: Tuple[Route, ...]
    entries: Tuple[ScheduleEntry, ...]
    staffing: StaffingResult
    records: Tuple[ScheduleRecord, ...]

    @property
    def departures(self) -> List[Departure]:
        """Every departure of every route, route by route."""
        return [d for record in self.records for d in record.departures]

    @property
    def departure_count(self) -> int:
        return sum(entry.departure_count for entry in self.entries)


def create_data_store(
    kind: Optional[str] = None,
    db_path: Optional[Union[str, Path]] = None,
) -> TransitDataStore:
    """
    Build the data store named by kind (defaults to Config.DATA_STORE).

    Raises:
        InvalidConfigurationError: If kind is unknown.
    """
    kind = (kind or Config.DATA_STORE).lower()
    if kind == "sqlite":
        return SQLiteTransitDataStore(db_path=db_path or Config.DB_PATH)
    if kind == "supabase":
        return SupabaseTransitDataStore(
            base_url=Config.SUPABASE_URL, api_key=Config.SUPABASE_KEY
        )
    if kind == "memory":
        return InMemoryTransitDataStore.with_demo_routes()
    raise InvalidConfigurationError(
        "data_store", f"Unknown data store '{kind}' (expected sqlite, supabase or memory)"
    )


class GenerateRouteSchedules:
    """
    Public API for generating route schedules and staffing.

    Example usage:
        >>> scheduler = GenerateRouteSchedules(data_store=InMemoryTransitDataStore.with_demo_routes())
        >>> run = scheduler.run()
        >>> run.staffing.total_staff
        ...

    Attributes:
        _data_store: Backend supplying routes and storing schedules.
        _config: Default settings for runs that pass none.
    """

    def __init__(
        self,
        data_store: Optional[TransitDataStore] = None,
        config: Optional[ScheduleConfig] = None,
        db_path: Optional[Union[str, Path]] = None,
    ) -> None:
        """
        Initialize the scheduler with optional custom dependencies.

        Args:
            data_store: Custom data store. If None, built from Config.
            config: Default schedule settings. If None, uses defaults.
            db_path: SQLite path when the default store is SQLite.
        """
        self._data_store = data_store or create_data_store(db_path=db_path)
        self._config = config or ScheduleConfig()
        logger.info(
            "GenerateRouteSchedules initialized with %s data store",
            self._data_store.name,
        )

    @property
    def config(self) -> ScheduleConfig:
        return self._config

    @property
    def data_store_name(self) -> str:
        return self._data_store.name

    @property
    def is_ready(self) -> bool:
        """Check if the data store is reachable."""
        return self._data_store.is_available

    def list_routes(self) -> List[Route]:
        """Fetch the current route catalog."""
        return self._data_store.list_routes()

    def generate_entries(
        self,
        routes: Sequence[Route],
        config: Optional[ScheduleConfig] = None,
    ) -> List[ScheduleEntry]:
        """Departure times per route for the configured operating day."""
        config = config or self._config
        return generate_schedules(
            routes,
            work_start=config.work_start,
            work_end=config.work_end,
            peak_windows=config.peak_windows,
            default_interval_minutes=config.default_interval_minutes,
            reference_date=config.reference_date,
        )

    def estimate(
        self,
        routes: Sequence[Route],
        entries: Sequence[ScheduleEntry],
        config: Optional[ScheduleConfig] = None,
    ) -> ScheduleRun:
        """Attach staffing and storable records to generated entries."""
        config = config or self._config
        staffing = estimate_staffing(
            entries,
            trip_durations=trip_durations_for(routes),
            work_start_hour=config.work_start_hour,
            morning_shift=config.morning_shift,
            evening_shift=config.evening_shift,
            required_work_minutes_per_employee=config.required_work_minutes_per_employee,
        )
        records = build_schedule_records(
            entries,
            routes,
            staffing,
            work_start_hour=config.work_start_hour,
            morning_shift=config.morning_shift,
        )
        return ScheduleRun(
            config=config,
            routes=tuple(routes),
            entries=tuple(entries),
            staffing=staffing,
            records=tuple(records),
        )

    def generate(
        self,
        routes: Sequence[Route],
        config: Optional[ScheduleConfig] = None,
    ) -> ScheduleRun:
        """
        Generate schedules and staffing for a given catalog (no I/O).

        Args:
            routes: Route catalog.
            config: Settings; defaults to the scheduler's config.

        Returns:
            ScheduleRun with entries, staffing and storable records.
        """
        config = config or self._config
        return self.estimate(routes, self.generate_entries(routes, config), config)

    def save(self, run: ScheduleRun) -> None:
        """Replace every stored schedule with the records of run."""
        self._data_store.save_schedules(run.records)

    def run(
        self,
        config: Optional[ScheduleConfig] = None,
        persist: bool = True,
    ) -> ScheduleRun:
        """
        Load the catalog, generate, estimate and (optionally) save.

        Saving replaces every previously stored schedule.

        Raises:
            InvalidConfigurationError: If config is invalid.
            InvalidRouteError: If the catalog holds unusable routes.
            DataStoreError: If the data store fails.
        """
        start_time = time.perf_counter()
        routes = self._data_store.list_routes()
        result = self.generate(routes, config)

        if persist:
            self.save(result)

        logger.info(
            "Schedule run completed: %d routes, %d departures, staff %d+%d in %.3fms%s",
            len(result.routes),
            result.departure_count,
            result.staffing.morning_staff,
            result.staffing.evening_staff,
            (time.perf_counter() - start_time) * 1000,
            " (saved)" if persist else "",
        )
        return result

    def estimate_saved_staffing(
        self,
        config: Optional[ScheduleConfig] = None,
    ) -> StaffingResult:
        """
        Recompute staffing from the schedules currently stored.

        Trip durations come from the stored records, so a catalog edit
        since the last save does not change the figure.
        """
        config = config or self._config
        records = self._data_store.load_schedules()
        return estimate_staffing(
            [record.to_entry() for record in records],
            trip_durations={r.route_id: r.estimated_time for r in records},
            work_start_hour=config.work_start_hour,
            morning_shift=config.morning_shift,
            evening_shift=config.evening_shift,
            required_work_minutes_per_employee=config.required_work_minutes_per_employee,
        )

    def assign_workers(
        self,
        config: Optional[ScheduleConfig] = None,
        persist: bool = True,
        departures: Optional[Sequence[Departure]] = None,
    ) -> AssignmentResult:
        """
        Distribute departures over the stored workers.

        Args:
            config: Settings override; defaults to the scheduler's.
            persist: Save each worker's schedule to the data store.
            departures: Departures to cover. Defaults to the stored
                schedules; pass a run's departures to assign an
                unsaved run.

        Returns:
            AssignmentResult; saved per worker when persist is True.
        """
        config = config or self._config
        if departures is None:
            departures = [
                d for record in self._data_store.load_schedules() for d in record.departures
            ]
        workers = self._data_store.list_workers()
        result = assign_departures(departures, workers, config.work_start_hour)

        if persist:
            self._data_store.save_worker_assignments(result)

        logger.info(
            "Assigned %d of %d departures to %d workers",
            result.assigned_count,
            len(departures),
            len(workers),
        )
        return result

    def shutdown(self) -> None:
        """Release the data store."""
        self._data_store.close()
        logger.info("GenerateRouteSchedules shutdown complete")

    def __enter__(self) -> "GenerateRouteSchedules":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit with cleanup."""
        self.shutdown()
