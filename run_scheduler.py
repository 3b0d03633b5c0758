"""
Transit Scheduler - Command Line Entry Point.

This script loads the route catalog from the configured data store,
generates the day's departures, estimates the staff needed per shift,
and replaces the stored schedules with the new ones.

Usage:
    python run_scheduler.py
    python run_scheduler.py --store memory --dry-run
    python run_scheduler.py --seed-demo --assign-workers
"""

import argparse
import logging
import sys
from typing import List, Optional

from src.transit_scheduler.adapters.data_stores import DEMO_ROUTES, SQLiteTransitDataStore
from src.transit_scheduler.application import GenerateRouteSchedules, ScheduleRun, create_data_store
from src.transit_scheduler.config import Config, load_schedule_config
from src.transit_scheduler.exceptions import SchedulerError
from src.transit_scheduler.services.worker_assignment_service import summarize_assignment

# Module-level logger
logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger to write to the console.

    Args:
        level: Log level name, e.g. "INFO" or "DEBUG".
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    formatter = logging.Formatter(log_format, datefmt=date_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate transit route schedules")
    parser.add_argument(
        "--store",
        choices=["sqlite", "supabase", "memory"],
        default=Config.DATA_STORE,
        help="Data store backend (default: %(default)s)",
    )
    parser.add_argument("--db-path", default=Config.DB_PATH, help="SQLite database path")
    parser.add_argument(
        "--config",
        default=Config.SCHEDULE_CONFIG_PATH,
        help="JSON file with schedule settings",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Generate without saving schedules"
    )
    parser.add_argument(
        "--seed-demo",
        action="store_true",
        help="Insert the demo routes into an empty SQLite catalog first",
    )
    parser.add_argument(
        "--assign-workers",
        action="store_true",
        help="Distribute the saved departures over the stored workers",
    )
    return parser.parse_args(argv)


def print_summary(run: ScheduleRun) -> None:
    """Print one line per route followed by the staffing figures."""
    for record in run.records:
        first = record.departure_times[0] if record.departures else "--:--"
        last = record.departure_times[-1] if record.departures else "--:--"
        print(
            f"{record.display_name:<24} every {record.frequency_minutes:>2} min  "
            f"{len(record.departures):>3} departures  {first} - {last}"
        )
    print(
        f"Staff needed: {run.staffing.morning_staff} morning, "
        f"{run.staffing.evening_staff} evening "
        f"({run.staffing.total_staff} total)"
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(Config.LOG_LEVEL)
    logger.info("Transit Scheduler starting (%s store)", args.store)

    try:
        config = load_schedule_config(args.config)
        store = create_data_store(args.store, db_path=args.db_path)

        if args.seed_demo and isinstance(store, SQLiteTransitDataStore):
            if not store.list_routes():
                store.add_routes(DEMO_ROUTES)
                logger.info("Seeded %d demo routes", len(DEMO_ROUTES))

        with GenerateRouteSchedules(data_store=store, config=config) as scheduler:
            run = scheduler.run(persist=not args.dry_run)
            print_summary(run)

            if args.assign_workers:
                # a dry run leaves the stored schedules stale
                result = scheduler.assign_workers(
                    persist=not args.dry_run,
                    departures=run.departures if args.dry_run else None,
                )
                summary = summarize_assignment(
                    total_departures=result.assigned_count + len(result.unassigned),
                    total_workers=len(result.assignments),
                )
                print(
                    f"Assigned {result.assigned_count} departures to "
                    f"{summary.total_workers} workers "
                    f"(needed: {summary.workers_needed})"
                )
                if not summary.is_sufficiently_staffed:
                    logger.warning(
                        "Understaffed: %d workers for %d departures",
                        summary.total_workers,
                        summary.total_departures,
                    )

    except SchedulerError as error:
        logger.error("Scheduling failed: %s", error)
        return 1

    except KeyboardInterrupt:
        logger.info("Scheduler stopped by user")
        return 0

    logger.info("Transit Scheduler finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
