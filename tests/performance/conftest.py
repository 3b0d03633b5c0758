"""
Shared fixtures for performance benchmarks.

Builds a large synthetic catalog once at module scope, then benchmarks
only the hot paths.
"""

from typing import List

import pytest

from src.transit_scheduler.schemas.route import Route
from src.transit_scheduler.schemas.schedule import ScheduleConfig
from src.transit_scheduler.services.schedule_generator_service import generate_schedules

CATALOG_SIZE = 200


@pytest.fixture(scope="module")
def large_catalog() -> List[Route]:
    """CATALOG_SIZE routes cycling through every priority and several durations."""
    return [
        Route(
            id=f"route-{i:04d}",
            name=f"Line {i}",
            estimated_time=20 + (i % 5) * 10,
            priority=1 + (i % 10),
        )
        for i in range(CATALOG_SIZE)
    ]


@pytest.fixture(scope="module")
def default_config() -> ScheduleConfig:
    return ScheduleConfig()


@pytest.fixture(scope="module")
def large_schedule(large_catalog, default_config):
    """Entries for the large catalog, generated once."""
    return generate_schedules(
        large_catalog,
        work_start=default_config.work_start,
        work_end=default_config.work_end,
        peak_windows=default_config.peak_windows,
    )
