"""Pytest configuration for service tests."""

from typing import List

import pytest

from src.transit_scheduler.schemas.route import Route
from src.transit_scheduler.schemas.schedule import (
    PeakWindow,
    ScheduleEntry,
    ShiftWindow,
)


@pytest.fixture
def demo_routes() -> List[Route]:
    """Three routes with different priorities and durations."""
    return [
        Route(id="1", name="Downtown Loop", estimated_time=45, priority=8),
        Route(id="2", name="Airport Express", estimated_time=30, priority=9),
        Route(id="3", name="Suburb Connector", estimated_time=60, priority=5),
    ]


@pytest.fixture
def default_peaks() -> tuple:
    """Morning and evening rush windows at 30 minutes."""
    return (
        PeakWindow(start_hour=8, end_hour=10, frequency_minutes=30),
        PeakWindow(start_hour=17, end_hour=20, frequency_minutes=30),
    )


@pytest.fixture
def morning_shift() -> ShiftWindow:
    return ShiftWindow(start_hour=6, end_hour=14)


@pytest.fixture
def evening_shift() -> ShiftWindow:
    return ShiftWindow(start_hour=14, end_hour=25)


def make_entry(route_id: str, departures, frequency: int = 10) -> ScheduleEntry:
    """Build a ScheduleEntry from a list of HH:MM strings."""
    return ScheduleEntry(
        route_id=route_id,
        departures=tuple(departures),
        frequency_minutes=frequency,
    )


@pytest.fixture
def entry_factory():
    """Expose make_entry to tests without importing conftest."""
    return make_entry
