"""Shared fixtures for data store adapter tests."""

from typing import List

import pytest

from src.transit_scheduler.schemas.route import Route
from src.transit_scheduler.schemas.schedule import Departure, ScheduleRecord, Shift
from src.transit_scheduler.schemas.workforce import Worker


@pytest.fixture
def catalog() -> List[Route]:
    return [
        Route(id="1", name="Downtown Loop", estimated_time=45, priority=8.0),
        Route(id="2", name="Airport Express", estimated_time=30, priority=9.0),
        Route(id="3", name="", estimated_time=60, priority=5.0),
    ]


@pytest.fixture
def schedule_records() -> List[ScheduleRecord]:
    """Two stored schedules with morning and evening departures."""
    return [
        ScheduleRecord(
            route_id="1",
            display_name="Downtown Loop",
            priority=8.0,
            estimated_time=45,
            frequency_minutes=17,
            departures=(
                Departure("1", "06:00", "06:45", 45, Shift.MORNING),
                Departure("1", "15:00", "15:45", 45, Shift.EVENING),
            ),
            morning_staff=1,
            evening_staff=1,
        ),
        ScheduleRecord(
            route_id="2",
            display_name="Airport Express",
            priority=9.0,
            estimated_time=30,
            frequency_minutes=13,
            departures=(Departure("2", "06:00", "06:30", 30, Shift.MORNING),),
            morning_staff=1,
            evening_staff=1,
        ),
    ]


@pytest.fixture
def workers() -> List[Worker]:
    return [
        Worker(id="w1", name="Ana", shift=Shift.MORNING),
        Worker(id="w2", name="Eve", shift=Shift.EVENING),
    ]
