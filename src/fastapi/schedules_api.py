import asyncio
import json
from datetime import date
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict
from dotenv import load_dotenv

from sse_starlette.sse import EventSourceResponse

# Load environment variables from .env file
load_dotenv()

from src.transit_scheduler.application import GenerateRouteSchedules, ScheduleRun
from src.transit_scheduler.config import load_schedule_config
from src.transit_scheduler.exceptions import (
    DataStoreError,
    InvalidConfigurationError,
    InvalidRouteError,
    SchedulerError,
)
from src.transit_scheduler.schemas.schedule import ScheduleConfig, Shift
from src.transit_scheduler.services.schedule_generator_service import build_frequency_table
from src.transit_scheduler.services.worker_assignment_service import summarize_assignment

scheduler = GenerateRouteSchedules(config=load_schedule_config())

app = FastAPI(title="Transit Scheduling API")

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Pydantic Schemas (The JSON Contract) ---
# from_attributes lets the API read straight from the frozen dataclasses.


class RouteSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    display_name: str  # @property
    estimated_time: int
    priority: float
    base_frequency: int


class DepartureSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start_time: str
    end_time: str
    shift: Shift


class ScheduleRecordSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    route_id: str
    display_name: str
    priority: float
    estimated_time: int
    frequency_minutes: int
    departures: List[DepartureSchema]


class StaffingSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    morning_staff: int
    evening_staff: int
    morning_minutes: int
    evening_minutes: int
    total_staff: int  # @property


class ScheduleRunSchema(BaseModel):
    schedules: List[ScheduleRecordSchema]
    staffing: StaffingSchema
    departure_count: int
    saved: bool


class PeakWindowSchema(BaseModel):
    start_hour: int
    end_hour: int
    frequency_minutes: int


class ShiftWindowSchema(BaseModel):
    start_hour: float
    end_hour: float


class GenerateRequest(BaseModel):
    """Overrides for the saved schedule settings; omitted fields keep them."""

    work_start: Optional[str] = None
    work_end: Optional[str] = None
    peak_windows: Optional[List[PeakWindowSchema]] = None
    morning_shift: Optional[ShiftWindowSchema] = None
    evening_shift: Optional[ShiftWindowSchema] = None
    required_work_minutes_per_employee: Optional[float] = None
    default_interval_minutes: Optional[int] = None
    reference_date: Optional[date] = None
    persist: bool = True

    def to_config(self, base: ScheduleConfig) -> ScheduleConfig:
        overrides = self.model_dump(mode="json", exclude_none=True, exclude={"persist"})
        return ScheduleConfig.from_dict({**base.to_dict(), **overrides})


class AssignRequest(BaseModel):
    persist: bool = True


class AssignmentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    route_id: str
    start_time: str
    end_time: str
    duration_minutes: int


class AssignmentSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_departures: int
    total_workers: int
    workers_needed: int
    departures_per_worker: int
    is_sufficiently_staffed: bool  # @property


class AssignResponse(BaseModel):
    assignments: Dict[str, List[AssignmentSchema]]
    unassigned: List[DepartureSchema]
    summary: AssignmentSummarySchema


def _http_error(error: SchedulerError) -> HTTPException:
    """Map a scheduler failure to the matching HTTP status."""
    if isinstance(error, (InvalidConfigurationError, InvalidRouteError)):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, DataStoreError):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def _run_response(run: ScheduleRun, saved: bool) -> ScheduleRunSchema:
    return ScheduleRunSchema(
        schedules=[ScheduleRecordSchema.model_validate(r) for r in run.records],
        staffing=StaffingSchema.model_validate(run.staffing),
        departure_count=run.departure_count,
        saved=saved,
    )


# --- API Endpoints ---


@app.get("/routes", response_model=List[RouteSchema])
async def list_routes():
    try:
        routes = scheduler.list_routes()
    except SchedulerError as e:
        raise _http_error(e) from e

    frequencies = build_frequency_table(routes)
    return [
        RouteSchema(
            id=route.id,
            name=route.name,
            display_name=route.display_name,
            estimated_time=route.estimated_time,
            priority=route.priority,
            base_frequency=frequencies[route.id],
        )
        for route in routes
    ]


@app.post("/schedules/generate", response_model=ScheduleRunSchema)
async def generate_schedules(request: GenerateRequest):
    try:
        config = request.to_config(scheduler.config)
        loop = asyncio.get_event_loop()
        run = await loop.run_in_executor(
            None, lambda: scheduler.run(config=config, persist=request.persist)
        )
    except SchedulerError as e:
        raise _http_error(e) from e

    return _run_response(run, saved=request.persist)


@app.post("/schedules/generate/stream")
async def generate_schedules_stream(request: GenerateRequest):
    """
    SSE streaming endpoint for schedule generation.

    Emits stage events during processing:
    - loading: Route catalog fetch started
    - generating: Departure generation started
    - estimating: Staffing estimation started
    - saving: Stored schedules are being replaced (only if persist)
    - complete: Final schedules and staffing, or an error
    """
    return EventSourceResponse(generate_with_stages(request))


async def generate_with_stages(request: GenerateRequest):
    """Generator that yields SSE events while a schedule run progresses."""
    loop = asyncio.get_event_loop()

    try:
        config = request.to_config(scheduler.config)

        # Stage 1: Loading
        yield {"event": "stage", "data": "loading"}
        routes = await loop.run_in_executor(None, scheduler.list_routes)

        # Stage 2: Generating
        yield {"event": "stage", "data": "generating"}
        entries = await loop.run_in_executor(
            None, lambda: scheduler.generate_entries(routes, config)
        )

        # Stage 3: Estimating
        yield {"event": "stage", "data": "estimating"}
        run = await loop.run_in_executor(
            None, lambda: scheduler.estimate(routes, entries, config)
        )

        # Stage 4: Saving
        if request.persist:
            yield {"event": "stage", "data": "saving"}
            await loop.run_in_executor(None, lambda: scheduler.save(run))
    except SchedulerError as e:
        error = _http_error(e)
        yield {
            "event": "complete",
            "data": json.dumps({"error": error.detail, "status_code": error.status_code}),
        }
        return

    # Stage 5: Complete
    yield {
        "event": "complete",
        "data": _run_response(run, saved=request.persist).model_dump_json(),
    }


@app.get("/schedules/staffing", response_model=StaffingSchema)
async def saved_staffing():
    """Staffing recomputed from the schedules currently stored."""
    try:
        loop = asyncio.get_event_loop()
        staffing = await loop.run_in_executor(None, scheduler.estimate_saved_staffing)
    except SchedulerError as e:
        raise _http_error(e) from e
    return StaffingSchema.model_validate(staffing)


@app.post("/workers/assign", response_model=AssignResponse)
async def assign_workers(request: AssignRequest):
    try:
        loop = asyncio.get_event_loop()
        result = await loop.run_in_executor(
            None, lambda: scheduler.assign_workers(persist=request.persist)
        )
    except SchedulerError as e:
        raise _http_error(e) from e

    summary = summarize_assignment(
        total_departures=result.assigned_count + len(result.unassigned),
        total_workers=len(result.assignments),
    )
    return AssignResponse(
        assignments={
            worker_id: [AssignmentSchema.model_validate(a) for a in items]
            for worker_id, items in result.assignments.items()
        },
        unassigned=[DepartureSchema.model_validate(d) for d in result.unassigned],
        summary=AssignmentSummarySchema.model_validate(summary),
    )
