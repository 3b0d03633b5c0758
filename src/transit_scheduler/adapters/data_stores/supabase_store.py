"""
Supabase Transit Data Store - hosted PostgREST adapter.

Talks to the hosted relational database through its REST interface
(/rest/v1/<table>) with a synchronous httpx client. Table layout
matches the SQLite store: optimized_routes, route_schedules, workers.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Sequence

import httpx

from src.transit_scheduler.exceptions import DataStoreError, InvalidTimeFormatError
from src.transit_scheduler.ports.transit_data_store import TransitDataStore
from src.transit_scheduler.schemas.route import Route
from src.transit_scheduler.schemas.schedule import ScheduleRecord
from src.transit_scheduler.schemas.workforce import AssignmentResult, Worker

logger = logging.getLogger(__name__)

STORE_NAME = "Supabase"
REST_PATH = "/rest/v1"

# Rows fetched per request when paging through large tables
PAGE_SIZE = 500

DEFAULT_TIMEOUT_SECONDS = 10.0


class SupabaseTransitDataStore(TransitDataStore):
    """
    Data store backed by a hosted Supabase project.

    Attributes:
        _base_url: Project URL (e.g., https://xyz.supabase.co).
        _api_key: Project API key, sent as apikey and bearer token.
        _client: HTTP client (lazy initialized).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize the Supabase data store.

        Args:
            base_url: Project URL. If None, reads SUPABASE_URL env.
            api_key: API key. If None, reads SUPABASE_KEY env.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests).
        """
        self._base_url = (base_url or os.environ.get("SUPABASE_URL", "")).rstrip("/")
        self._api_key = api_key or os.environ.get("SUPABASE_KEY", "")
        if not self._base_url or not self._api_key:
            raise DataStoreError(
                STORE_NAME, "SUPABASE_URL and SUPABASE_KEY must be set"
            )
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=f"{self._base_url}{REST_PATH}",
                headers={
                    "apikey": self._api_key,
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
                timeout=httpx.Timeout(self._timeout, connect=5.0),
                transport=self._transport,
            )
        return self._client

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Send a request and raise DataStoreError on any failure."""
        try:
            response = self._get_client().request(
                method, f"/{table}", params=params, json=json, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DataStoreError(
                STORE_NAME,
                f"{method} {table} returned {e.response.status_code}: {e.response.text}",
            ) from e
        except httpx.HTTPError as e:
            raise DataStoreError(STORE_NAME, f"{method} {table} failed: {e}") from e
        return response

    def _select_all(self, table: str, select: str, order: str) -> List[Dict[str, Any]]:
        """Fetch every row of a table, PAGE_SIZE rows per request."""
        rows: List[Dict[str, Any]] = []
        offset = 0
        while True:
            page = self._request(
                "GET",
                table,
                params={
                    "select": select,
                    "order": order,
                    "limit": PAGE_SIZE,
                    "offset": offset,
                },
            ).json()
            rows.extend(page)
            if len(page) < PAGE_SIZE:
                break
            offset += PAGE_SIZE
        logger.debug("Fetched %d rows from %s", len(rows), table)
        return rows

    def list_routes(self) -> List[Route]:
        rows = self._select_all(
            "optimized_routes", "id,name,duration,avg_priority", "name.asc,id.asc"
        )
        return [Route.from_record(row) for row in rows]

    def save_schedules(self, records: Sequence[ScheduleRecord]) -> None:
        # PostgREST refuses unfiltered deletes; this filter matches every row
        self._request("DELETE", "route_schedules", params={"id": "neq.0"})
        if records:
            self._request(
                "POST",
                "route_schedules",
                json=[
                    {
                        "route_id": r.route_id,
                        "schedule": r.to_payload(),
                        "morning_staff": r.morning_staff,
                        "evening_staff": r.evening_staff,
                    }
                    for r in records
                ],
                headers={"Prefer": "return=minimal"},
            )
        logger.info("Saved %d route schedules", len(records))

    def load_schedules(self) -> List[ScheduleRecord]:
        rows = self._select_all(
            "route_schedules", "route_id,schedule,morning_staff,evening_staff", "id.asc"
        )
        records = []
        for row in rows:
            try:
                records.append(
                    ScheduleRecord.from_payload(
                        route_id=str(row["route_id"]),
                        payload=row["schedule"],
                        morning_staff=row.get("morning_staff") or 0,
                        evening_staff=row.get("evening_staff") or 0,
                    )
                )
            except (KeyError, TypeError, ValueError, InvalidTimeFormatError) as e:
                raise DataStoreError(
                    STORE_NAME,
                    f"malformed schedule for route '{row.get('route_id')}': {e}",
                ) from e
        return records

    def list_workers(self) -> List[Worker]:
        rows = self._select_all("workers", "id,name,shift", "id.asc")
        return [Worker.from_record(row) for row in rows]

    def save_worker_assignments(self, result: AssignmentResult) -> None:
        documents = result.as_schedule_documents()
        for worker_id, items in documents.items():
            self._request(
                "PATCH",
                "workers",
                params={"id": f"eq.{worker_id}"},
                json={"employee_schedule": items},
                headers={"Prefer": "return=minimal"},
            )
        logger.info("Saved assignments for %d workers", len(documents))

    @property
    def name(self) -> str:
        return STORE_NAME

    @property
    def is_available(self) -> bool:
        try:
            self._request("GET", "optimized_routes", params={"select": "id", "limit": 1})
        except DataStoreError:
            return False
        return True

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
        self._client = None
