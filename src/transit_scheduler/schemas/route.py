"""
Route catalog schemas.

Defines the input contract for routes supplied by the route catalog.
Tabular catalogs are validated with Pandera at the storage boundary,
then converted into immutable Route objects.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import pandera as pa
from pandera.typing import Series

from src.transit_scheduler.exceptions import InvalidRouteError
from src.transit_scheduler.validation import (
    DEFAULT_PRIORITY,
    normalize_priority,
    validate_trip_duration,
)


class RouteCatalogSchema(pa.DataFrameModel):
    """
    Schema for optimized route rows as stored by the data store.

    Column names follow the stored table (duration, avg_priority),
    not the in-memory Route attribute names.
    """

    id: Series[str] = pa.Field(
        nullable=False,
        unique=True,
        description="Opaque route identifier",
    )
    duration: Series[float] = pa.Field(
        nullable=True,
        description="Estimated trip duration in minutes",
    )
    avg_priority: Series[float] = pa.Field(
        nullable=True,
        description="Average stop priority (1-10), defaults to 5 when missing",
    )
    name: Series[str] = pa.Field(
        nullable=True,
        description="Display label",
    )

    class Config:
        strict = False
        coerce = True
        name = "RouteCatalogSchema"


@dataclass(frozen=True)
class Route:
    """
    Immutable route supplied by the catalog for one generation run.

    Attributes:
        id: Opaque identifier, unique within a catalog.
        estimated_time: Trip duration in minutes. Drives staffing, so
            it is required and never guessed.
        priority: Service priority; higher means more frequent service.
            Clamped to [1, 10] only when the base frequency is derived.
        name: Display label, not used in computation.
    """

    id: str
    estimated_time: int
    priority: float = DEFAULT_PRIORITY
    name: str = ""

    def __post_init__(self) -> None:
        """Validate route fields after initialization."""
        if not isinstance(self.id, str) or not self.id:
            raise InvalidRouteError(self.id, "Route id must be a non-empty string")
        validate_trip_duration(self.id, self.estimated_time)

    @property
    def display_name(self) -> str:
        """Name for display, falling back to the id."""
        return self.name or self.id

    @classmethod
    def create(
        cls,
        id: str,
        estimated_time: int,
        priority: Optional[Any] = None,
        name: Optional[str] = None,
    ) -> "Route":
        """
        Factory method for creating a Route from loosely typed values.

        Priority goes through the default policy (absent or invalid
        becomes 5); trip duration is validated strictly.
        """
        if id is None or id == "":
            raise InvalidRouteError(id, "Route id is required")
        return cls(
            id=str(id),
            estimated_time=validate_trip_duration(id, estimated_time),
            priority=normalize_priority(priority),
            name=name if isinstance(name, str) else "",
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Route":
        """
        Build a Route from a stored optimized-route row.

        Args:
            record: Mapping with keys id, duration, avg_priority, name.

        Returns:
            Validated Route.

        Raises:
            MissingTripDurationError: If the row has no duration.
        """
        return cls.create(
            id=record.get("id"),
            estimated_time=record.get("duration"),
            priority=record.get("avg_priority"),
            name=record.get("name"),
        )

    def to_record(self) -> dict:
        """Inverse of from_record."""
        return {
            "id": self.id,
            "name": self.name,
            "duration": self.estimated_time,
            "avg_priority": self.priority,
        }
