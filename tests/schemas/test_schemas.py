"""
Tests for transit_scheduler schema definitions.

Validates that:
1. Dataclass constructors reject invalid values
2. Route factories apply the priority default policy
3. Pandera schemas accept well-formed frames and reject bad rows
4. Stored schedule documents round-trip through ScheduleRecord
"""

from datetime import date

import pandas as pd
import pandera as pa
import pytest

from src.transit_scheduler.exceptions import (
    InvalidConfigurationError,
    InvalidRouteError,
    InvalidTimeFormatError,
    MissingTripDurationError,
)
from src.transit_scheduler.schemas.route import Route, RouteCatalogSchema
from src.transit_scheduler.schemas.schedule import (
    DEFAULT_PEAK_WINDOWS,
    Departure,
    DepartureSchema,
    PeakWindow,
    ScheduleConfig,
    ScheduleRecord,
    Shift,
    ShiftWindow,
    StaffingResult,
)
from src.transit_scheduler.schemas.workforce import (
    AssignmentResult,
    Worker,
    WorkerAssignment,
)


# -------------------------
# Fixtures
# -------------------------


@pytest.fixture
def sample_record() -> ScheduleRecord:
    """Record with one morning and one post-midnight departure."""
    return ScheduleRecord(
        route_id="r1",
        display_name="Downtown Loop",
        priority=8.0,
        estimated_time=45,
        frequency_minutes=17,
        departures=(
            Departure("r1", "06:00", "06:45", 45, Shift.MORNING),
            Departure("r1", "23:50", "00:35", 45, Shift.EVENING),
        ),
        morning_staff=3,
        evening_staff=4,
    )


# -------------------------
# Route
# -------------------------


class TestRoute:
    """Tests for the Route dataclass and its factories."""

    def test_display_name_falls_back_to_id(self) -> None:
        assert Route(id="r1", estimated_time=30).display_name == "r1"
        assert Route(id="r1", estimated_time=30, name="Loop").display_name == "Loop"

    def test_default_priority(self) -> None:
        assert Route(id="r1", estimated_time=30).priority == 5.0

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(InvalidRouteError):
            Route(id="", estimated_time=30)

    def test_missing_duration_rejected(self) -> None:
        with pytest.raises(MissingTripDurationError):
            Route(id="r1", estimated_time=None)

    def test_route_is_frozen(self) -> None:
        route = Route(id="r1", estimated_time=30)
        with pytest.raises(AttributeError):
            route.priority = 9  # type: ignore[misc]

    def test_create_normalizes_priority(self) -> None:
        route = Route.create(id=7, estimated_time=30.0, priority="n/a", name=None)

        assert route.id == "7"
        assert route.estimated_time == 30
        assert route.priority == 5.0
        assert route.name == ""

    def test_create_requires_id(self) -> None:
        with pytest.raises(InvalidRouteError):
            Route.create(id=None, estimated_time=30)

    def test_record_round_trip(self) -> None:
        route = Route(id="r1", estimated_time=45, priority=8.0, name="Loop")

        assert Route.from_record(route.to_record()) == route


class TestRouteCatalogSchema:
    """Tests for the stored catalog frame schema."""

    def test_valid_catalog_passes(self) -> None:
        df = pd.DataFrame({
            "id": ["1", "2"],
            "name": ["Loop", "Express"],
            "duration": [45, 30],
            "avg_priority": [8.0, None],
        })

        validated = RouteCatalogSchema.validate(df)

        assert validated["duration"].dtype == float
        assert pd.isna(validated["avg_priority"].iloc[1])

    def test_duplicate_ids_fail(self) -> None:
        df = pd.DataFrame({
            "id": ["1", "1"],
            "name": ["Loop", "Loop"],
            "duration": [45.0, 45.0],
            "avg_priority": [8.0, 8.0],
        })

        with pytest.raises(pa.errors.SchemaError):
            RouteCatalogSchema.validate(df)


# -------------------------
# Configuration
# -------------------------


class TestPeakWindow:
    """Tests for PeakWindow."""

    def test_contains_is_end_exclusive(self) -> None:
        window = PeakWindow(start_hour=8, end_hour=10, frequency_minutes=30)

        assert window.contains(8)
        assert window.contains(9)
        assert not window.contains(10)
        assert not window.contains(7)

    def test_sampling_step_is_half_frequency(self) -> None:
        assert PeakWindow(6, 8, 20).sampling_step_minutes == 10
        assert PeakWindow(6, 8, 25).sampling_step_minutes == 12

    @pytest.mark.parametrize("start,end,freq", [(-1, 8, 20), (6, 24, 20), (6, 8, 1), (6, 8, 0)])
    def test_invalid_window_rejected(self, start, end, freq) -> None:
        with pytest.raises(InvalidConfigurationError):
            PeakWindow(start_hour=start, end_hour=end, frequency_minutes=freq)

    def test_from_dict_missing_key(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            PeakWindow.from_dict({"start_hour": 8, "end_hour": 10})


class TestShiftWindow:
    """Tests for ShiftWindow."""

    def test_evening_may_end_after_midnight(self) -> None:
        window = ShiftWindow(start_hour=14, end_hour=25)

        assert window.contains(24)
        assert not window.contains(25)

    def test_start_must_precede_end(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            ShiftWindow(start_hour=14, end_hour=14)


class TestScheduleConfig:
    """Tests for ScheduleConfig."""

    def test_defaults(self) -> None:
        config = ScheduleConfig()

        assert config.work_start == "06:00"
        assert config.work_end == "01:00"
        assert config.peak_windows == DEFAULT_PEAK_WINDOWS
        assert config.morning_shift == ShiftWindow(6, 14)
        assert config.evening_shift == ShiftWindow(14, 25)
        assert config.required_work_minutes_per_employee == 420
        assert config.default_interval_minutes == 10
        assert config.work_start_hour == 6

    def test_invalid_time_rejected(self) -> None:
        with pytest.raises(InvalidTimeFormatError):
            ScheduleConfig(work_start="6am")

    @pytest.mark.parametrize("required", [0, -420, float("nan")])
    def test_invalid_required_minutes_rejected(self, required) -> None:
        with pytest.raises(InvalidConfigurationError):
            ScheduleConfig(required_work_minutes_per_employee=required)

    def test_zero_interval_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            ScheduleConfig(default_interval_minutes=0)

    def test_peak_windows_must_be_tuple(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            ScheduleConfig(peak_windows=[PeakWindow(8, 10, 30)])

    def test_create_converts_list(self) -> None:
        config = ScheduleConfig.create(peak_windows=[PeakWindow(7, 9, 20)])

        assert config.peak_windows == (PeakWindow(7, 9, 20),)

    def test_dict_round_trip(self) -> None:
        config = ScheduleConfig.create(
            work_start="05:30",
            work_end="23:00",
            peak_windows=[PeakWindow(7, 9, 20)],
            reference_date=date(2030, 1, 2),
        )

        assert ScheduleConfig.from_dict(config.to_dict()) == config

    def test_from_dict_fills_missing_keys(self) -> None:
        config = ScheduleConfig.from_dict({"work_end": "22:00"})

        assert config.work_end == "22:00"
        assert config.work_start == "06:00"
        assert config.peak_windows == DEFAULT_PEAK_WINDOWS

    def test_from_dict_bad_reference_date(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            ScheduleConfig.from_dict({"reference_date": "someday"})


# -------------------------
# Outputs
# -------------------------


class TestStaffingResult:
    """Tests for StaffingResult."""

    def test_totals(self) -> None:
        result = StaffingResult(2, 3, 700, 1100)

        assert result.total_staff == 5
        assert result.total_minutes == 1800

    def test_empty(self) -> None:
        assert StaffingResult.empty() == StaffingResult(0, 0, 0, 0)


class TestDepartureSchema:
    """Tests for the departure export frame."""

    def test_valid_rows_pass(self, sample_record: ScheduleRecord) -> None:
        df = pd.DataFrame([d.to_dict() for d in sample_record.departures])

        validated = DepartureSchema.validate(df)

        assert list(validated["shift"]) == ["morning", "evening"]

    def test_unknown_shift_fails(self) -> None:
        df = pd.DataFrame([{
            "route_id": "r1",
            "start_time": "06:00",
            "end_time": "06:45",
            "duration_minutes": 45,
            "shift": "night",
        }])

        with pytest.raises(pa.errors.SchemaError):
            DepartureSchema.validate(df)


class TestScheduleRecord:
    """Tests for ScheduleRecord payload conversion."""

    def test_payload_shape(self, sample_record: ScheduleRecord) -> None:
        payload = sample_record.to_payload()

        assert payload["departures"] == ["06:00", "23:50"]
        assert payload["departures_with_end_times"][1] == {
            "start_time": "23:50",
            "end_time": "00:35",
            "shift": "evening",
        }
        assert payload["frequency"] == 17
        assert payload["priority"] == 8.0
        assert payload["estimated_time"] == 45
        assert payload["display_id"] == "Downtown Loop"

    def test_payload_round_trip(self, sample_record: ScheduleRecord) -> None:
        restored = ScheduleRecord.from_payload(
            "r1", sample_record.to_payload(), morning_staff=3, evening_staff=4
        )

        assert restored == sample_record

    def test_to_entry(self, sample_record: ScheduleRecord) -> None:
        entry = sample_record.to_entry()

        assert entry.route_id == "r1"
        assert entry.departures == ("06:00", "23:50")
        assert entry.departure_count == 2

    def test_malformed_payload_raises(self) -> None:
        with pytest.raises(KeyError):
            ScheduleRecord.from_payload("r1", {"departures": []})


# -------------------------
# Workforce
# -------------------------


class TestWorkforce:
    """Tests for Worker and AssignmentResult."""

    def test_worker_from_record(self) -> None:
        worker = Worker.from_record({"id": 12, "name": "Ana", "shift": "evening"})

        assert worker == Worker(id="12", name="Ana", shift=Shift.EVENING)

    def test_worker_unknown_shift(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            Worker.from_record({"id": "w1", "name": "Ana", "shift": "night"})

    def test_assignment_result_totals(self) -> None:
        result = AssignmentResult(
            assignments={
                "w1": (
                    WorkerAssignment("w1", "r1", "06:00", "06:45", 45),
                    WorkerAssignment("w1", "r2", "07:00", "07:30", 30),
                ),
                "w2": (),
            }
        )

        assert result.minutes_for("w1") == 75
        assert result.minutes_for("w2") == 0
        assert result.assigned_count == 2
        assert result.as_schedule_documents()["w1"][1] == {
            "route_id": "r2",
            "start_time": "07:00",
            "end_time": "07:30",
            "duration": 30,
        }
