"""
SQLite Transit Data Store - SQL to DataFrame adapter.

Reads the route catalog from the optimized_routes table through pandas,
validates it against RouteCatalogSchema, and persists schedules and
worker assignments as JSON documents.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import pandas as pd
import pandera as pa

from src.transit_scheduler.exceptions import DataStoreError, InvalidTimeFormatError
from src.transit_scheduler.ports.transit_data_store import TransitDataStore
from src.transit_scheduler.schemas.route import Route, RouteCatalogSchema
from src.transit_scheduler.schemas.schedule import ScheduleRecord
from src.transit_scheduler.schemas.workforce import AssignmentResult, Worker

logger = logging.getLogger(__name__)

STORE_NAME = "SQLite"


class SQLiteTransitDataStore(TransitDataStore):
    """
    Data store backed by a SQLite database file.

    Creates its tables on first connection:
        - optimized_routes: route catalog (id, name, duration, avg_priority)
        - route_schedules: one schedule document per route
        - workers: drivers with their shift and stored assignments

    Attributes:
        _db_path: Path to the database file (":memory:" allowed).
        _conn: SQLite connection (lazy initialized).
    """

    def __init__(self, db_path: Union[str, Path] = "data/transit.db") -> None:
        """
        Initialize the SQLite data store.

        Args:
            db_path: Path to SQLite database file, or ":memory:".
        """
        self._db_path = str(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            logger.debug("Connecting to database: %s", self._db_path)
            try:
                if self._db_path != ":memory:":
                    Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
                # API requests reach the store from executor threads
                self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
            except (sqlite3.Error, OSError) as e:
                raise DataStoreError(STORE_NAME, f"cannot open {self._db_path}: {e}") from e
            self._create_tables()
        return self._conn

    def _create_tables(self) -> None:
        """Create tables if they do not exist."""
        cursor = self._conn.cursor()
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS optimized_routes (
                id TEXT PRIMARY KEY,
                name TEXT,
                duration INTEGER,
                avg_priority REAL
            )
        ''')
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS route_schedules (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                route_id TEXT NOT NULL,
                schedule TEXT NOT NULL,
                morning_staff INTEGER NOT NULL,
                evening_staff INTEGER NOT NULL
            )
        ''')
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS workers (
                id TEXT PRIMARY KEY,
                name TEXT,
                shift TEXT NOT NULL,
                employee_schedule TEXT
            )
        ''')
        self._conn.commit()

    def add_routes(self, routes: Iterable[Route]) -> None:
        """Insert or replace catalog rows."""
        rows = [
            (r.id, r.name, r.estimated_time, r.priority) for r in routes
        ]
        self._execute_many(
            "INSERT OR REPLACE INTO optimized_routes (id, name, duration, avg_priority) "
            "VALUES (?, ?, ?, ?)",
            rows,
        )
        logger.info("Stored %d routes", len(rows))

    def add_workers(self, workers: Iterable[Worker]) -> None:
        """Insert or replace worker rows (keeps no stored assignments)."""
        rows = [(w.id, w.name, w.shift.value) for w in workers]
        self._execute_many(
            "INSERT OR REPLACE INTO workers (id, name, shift) VALUES (?, ?, ?)",
            rows,
        )

    def _execute_many(self, sql: str, rows: Sequence[tuple]) -> None:
        conn = self._get_connection()
        try:
            with conn:
                conn.executemany(sql, rows)
        except sqlite3.Error as e:
            raise DataStoreError(STORE_NAME, str(e)) from e

    def _read_frame(self, query: str) -> pd.DataFrame:
        conn = self._get_connection()
        try:
            return pd.read_sql_query(query, conn)
        except (sqlite3.Error, pd.errors.DatabaseError) as e:
            raise DataStoreError(STORE_NAME, str(e)) from e

    def list_routes(self) -> List[Route]:
        """
        Fetch the catalog and convert rows to Routes.

        Raises:
            DataStoreError: If the catalog fails schema validation.
            MissingTripDurationError: If a row has no duration.
        """
        df = self._read_frame(
            "SELECT id, COALESCE(name, '') AS name, duration, avg_priority "
            "FROM optimized_routes "
            "ORDER BY name, id"
        )
        if df.empty:
            logger.warning("Route catalog is empty")
            return []

        try:
            df = RouteCatalogSchema.validate(df)
        except pa.errors.SchemaError as e:
            raise DataStoreError(STORE_NAME, f"invalid route catalog: {e}") from e

        # NaN -> None so Route.from_record sees missing values as missing
        records = df.astype(object).where(df.notna(), None).to_dict("records")
        routes = [Route.from_record(record) for record in records]
        logger.debug("Loaded %d routes from %s", len(routes), self._db_path)
        return routes

    def save_schedules(self, records: Sequence[ScheduleRecord]) -> None:
        rows = [
            (
                r.route_id,
                json.dumps(r.to_payload()),
                r.morning_staff,
                r.evening_staff,
            )
            for r in records
        ]
        conn = self._get_connection()
        try:
            with conn:
                conn.execute("DELETE FROM route_schedules")
                conn.executemany(
                    "INSERT INTO route_schedules "
                    "(route_id, schedule, morning_staff, evening_staff) "
                    "VALUES (?, ?, ?, ?)",
                    rows,
                )
        except sqlite3.Error as e:
            raise DataStoreError(STORE_NAME, str(e)) from e
        logger.info("Saved %d route schedules", len(rows))

    def load_schedules(self) -> List[ScheduleRecord]:
        df = self._read_frame(
            "SELECT route_id, schedule, morning_staff, evening_staff "
            "FROM route_schedules ORDER BY id"
        )
        records = []
        for row in df.itertuples(index=False):
            try:
                records.append(
                    ScheduleRecord.from_payload(
                        route_id=row.route_id,
                        payload=json.loads(row.schedule),
                        morning_staff=int(row.morning_staff),
                        evening_staff=int(row.evening_staff),
                    )
                )
            except (KeyError, ValueError, InvalidTimeFormatError) as e:
                raise DataStoreError(
                    STORE_NAME, f"malformed schedule for route '{row.route_id}': {e}"
                ) from e
        return records

    def list_workers(self) -> List[Worker]:
        df = self._read_frame("SELECT id, name, shift FROM workers ORDER BY id")
        return [Worker.from_record(record) for record in df.to_dict("records")]

    def save_worker_assignments(self, result: AssignmentResult) -> None:
        documents = result.as_schedule_documents()
        self._execute_many(
            "UPDATE workers SET employee_schedule = ? WHERE id = ?",
            [(json.dumps(items), worker_id) for worker_id, items in documents.items()],
        )
        logger.info("Saved assignments for %d workers", len(documents))

    def worker_schedule(self, worker_id: str) -> List[dict]:
        """Stored assignment documents for one worker."""
        conn = self._get_connection()
        row = conn.execute(
            "SELECT employee_schedule FROM workers WHERE id = ?", (worker_id,)
        ).fetchone()
        if row is None or row[0] is None:
            return []
        return json.loads(row[0])

    @property
    def name(self) -> str:
        return STORE_NAME

    @property
    def is_available(self) -> bool:
        try:
            self._get_connection().execute("SELECT 1")
        except (DataStoreError, sqlite3.Error):
            return False
        return True

    def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
