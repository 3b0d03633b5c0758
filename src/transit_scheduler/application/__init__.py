"""
Application layer for the Transit Scheduler.

This layer provides the public API for schedule generation. It acts as
a facade, handling data store initialization and providing a simple
interface for consumers.
"""

from src.transit_scheduler.application.generate_route_schedules import (
    GenerateRouteSchedules,
    ScheduleRun,
    create_data_store,
)

__all__ = ["GenerateRouteSchedules", "ScheduleRun", "create_data_store"]
