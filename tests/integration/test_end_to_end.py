"""
End-to-End Integration Tests for the Transit Scheduler.

These tests validate the complete stack against a real SQLite file:
- SQLiteTransitDataStore (SQL to DataFrame, Pandera validation)
- generate_schedules / estimate_staffing (services)
- GenerateRouteSchedules (public API)
- run_scheduler (command line entry point)
"""

import json

import pytest

import run_scheduler
from src.transit_scheduler.adapters.data_stores import DEMO_ROUTES, SQLiteTransitDataStore
from src.transit_scheduler.application import GenerateRouteSchedules
from src.transit_scheduler.clock import add_minutes
from src.transit_scheduler.config import save_schedule_config
from src.transit_scheduler.schemas.schedule import PeakWindow, ScheduleConfig, Shift
from src.transit_scheduler.schemas.workforce import Worker
from src.transit_scheduler.services.staffing_estimator_service import departures_to_frame


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "transit.db"


@pytest.fixture
def seeded_store(db_path):
    store = SQLiteTransitDataStore(db_path=db_path)
    store.add_routes(DEMO_ROUTES)
    store.add_workers([
        Worker(id="m1", name="Ana", shift=Shift.MORNING),
        Worker(id="m2", name="Ben", shift=Shift.MORNING),
        Worker(id="e1", name="Eve", shift=Shift.EVENING),
        Worker(id="e2", name="Dan", shift=Shift.EVENING),
    ])
    yield store
    store.close()


class TestFullDay:
    """Default settings over the demo catalog."""

    def test_generate_save_reload(self, seeded_store, db_path) -> None:
        with GenerateRouteSchedules(data_store=seeded_store) as scheduler:
            run = scheduler.run()

        reopened = SQLiteTransitDataStore(db_path=db_path)
        try:
            stored = reopened.load_schedules()
        finally:
            reopened.close()

        assert stored == list(run.records)
        assert {r.display_name for r in stored} == {
            "Airport Express", "Downtown Loop", "Suburb Connector"
        }

    def test_departure_invariants(self, seeded_store) -> None:
        run = GenerateRouteSchedules(data_store=seeded_store).run(persist=False)

        for record in run.records:
            assert record.departure_times[0] == "06:00"
            for d in record.departures:
                assert d.end_time == add_minutes(d.start_time, record.estimated_time)
        # evening shift ends at 01:00 so late departures exist
        assert any(d.start_time.startswith("00:") for d in run.departures)

    def test_staffing_consistent_with_frame(self, seeded_store) -> None:
        run = GenerateRouteSchedules(data_store=seeded_store).run(persist=False)

        df = departures_to_frame(run.departures)
        minutes = df.groupby("shift")["duration_minutes"].sum()

        assert minutes["morning"] == run.staffing.morning_minutes
        assert minutes["evening"] == run.staffing.evening_minutes

    def test_saved_staffing_and_assignment(self, seeded_store) -> None:
        scheduler = GenerateRouteSchedules(data_store=seeded_store)
        run = scheduler.run()

        assert scheduler.estimate_saved_staffing() == run.staffing

        result = scheduler.assign_workers()

        assert result.unassigned == ()
        assert result.assigned_count == run.departure_count
        morning_load = [result.minutes_for("m1"), result.minutes_for("m2")]
        assert max(morning_load) - min(morning_load) <= 60
        assert len(seeded_store.worker_schedule("e2")) == len(result.assignments["e2"])

    def test_custom_peaks_add_departures(self, seeded_store) -> None:
        scheduler = GenerateRouteSchedules(data_store=seeded_store)
        quiet = scheduler.run(
            ScheduleConfig.create(peak_windows=[]), persist=False
        )
        busy = scheduler.run(
            ScheduleConfig.create(peak_windows=[PeakWindow(6, 23, 20)]), persist=False
        )

        assert busy.departure_count > quiet.departure_count


class TestCommandLine:
    """run_scheduler.main against temporary files."""

    def test_seed_and_run(self, tmp_path, capsys) -> None:
        db_path = tmp_path / "cli.db"

        exit_code = run_scheduler.main([
            "--store", "sqlite",
            "--db-path", str(db_path),
            "--config", str(tmp_path / "absent.json"),
            "--seed-demo",
        ])

        assert exit_code == 0
        output = capsys.readouterr().out
        assert "Airport Express" in output
        assert "Staff needed" in output

        store = SQLiteTransitDataStore(db_path=db_path)
        try:
            assert len(store.load_schedules()) == 3
        finally:
            store.close()

    def test_dry_run_uses_saved_config(self, tmp_path, capsys) -> None:
        config_path = save_schedule_config(
            ScheduleConfig.create(work_start="06:00", work_end="07:00", peak_windows=[]),
            tmp_path / "schedule.json",
        )

        exit_code = run_scheduler.main([
            "--store", "memory",
            "--config", str(config_path),
            "--dry-run",
        ])

        assert exit_code == 0
        output = capsys.readouterr().out
        assert "06:00 - 06:" in output

    def test_dry_run_assigns_fresh_departures(
        self, seeded_store, db_path, tmp_path, capsys
    ) -> None:
        exit_code = run_scheduler.main([
            "--store", "sqlite",
            "--db-path", str(db_path),
            "--config", str(tmp_path / "absent.json"),
            "--dry-run",
            "--assign-workers",
        ])

        assert exit_code == 0
        output = capsys.readouterr().out
        assert "Assigned 0 departures" not in output
        assert "Assigned " in output
        assert seeded_store.load_schedules() == []
        assert seeded_store.worker_schedule("m1") == []

    def test_invalid_config_exits_nonzero(self, tmp_path) -> None:
        config_path = tmp_path / "schedule.json"
        config_path.write_text(json.dumps({"work_start": "late"}), encoding="utf-8")

        exit_code = run_scheduler.main([
            "--store", "memory",
            "--config", str(config_path),
        ])

        assert exit_code == 1
