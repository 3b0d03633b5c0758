"""
Fixtures for FastAPI endpoint tests.

Every test runs against a scheduler backed by the in-memory demo store,
patched in place of the module-level scheduler.
"""

import pytest
from fastapi.testclient import TestClient

from src.transit_scheduler.adapters.data_stores.in_memory_store import (
    DEMO_ROUTES,
    InMemoryTransitDataStore,
)
from src.transit_scheduler.application import GenerateRouteSchedules
from src.transit_scheduler.schemas.schedule import Shift
from src.transit_scheduler.schemas.workforce import Worker


@pytest.fixture
def anyio_backend():
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def demo_store() -> InMemoryTransitDataStore:
    return InMemoryTransitDataStore(
        routes=DEMO_ROUTES,
        workers=[
            Worker(id="m1", name="Ana", shift=Shift.MORNING),
            Worker(id="m2", name="Ben", shift=Shift.MORNING),
            Worker(id="e1", name="Eve", shift=Shift.EVENING),
        ],
    )


@pytest.fixture
def demo_scheduler(demo_store, monkeypatch) -> GenerateRouteSchedules:
    """Scheduler over the demo store, installed into the API module."""
    scheduler = GenerateRouteSchedules(data_store=demo_store)
    monkeypatch.setattr("src.fastapi.schedules_api.scheduler", scheduler)
    return scheduler


@pytest.fixture
def client(demo_scheduler) -> TestClient:
    from src.fastapi.schedules_api import app

    return TestClient(app)
