"""
Schedule configuration and output schemas.

Defines the contract between the caller-owned settings surface, the
schedule generator and the staffing estimator. Configuration objects
validate themselves on construction so that invalid settings fail
before any scheduling work begins.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import pandera as pa
from pandera.typing import Series

from src.transit_scheduler.clock import REFERENCE_DATE, parse_clock_time
from src.transit_scheduler.exceptions import InvalidConfigurationError
from src.transit_scheduler.validation import (
    validate_hour,
    validate_positive_int,
    validate_positive_number,
    validate_shift_hour,
)

DEFAULT_INTERVAL_MINUTES = 10
DEFAULT_REQUIRED_WORK_MINUTES = 420


class Shift(str, Enum):
    """Staffing shift a departure belongs to."""

    MORNING = "morning"
    EVENING = "evening"


@dataclass(frozen=True)
class PeakWindow:
    """
    Hour range with intensified service.

    Attributes:
        start_hour: First hour of the window (0-23, inclusive).
        end_hour: Hour the window ends (0-23, exclusive).
        frequency_minutes: Target headway inside the window. The
            generator samples the clock every frequency_minutes // 2
            minutes while inside, so the value must be at least 2.
    """

    start_hour: int
    end_hour: int
    frequency_minutes: int

    def __post_init__(self) -> None:
        """Validate window bounds after initialization."""
        validate_hour(self.start_hour, "peak_window.start_hour")
        validate_hour(self.end_hour, "peak_window.end_hour")
        validate_positive_int(
            self.frequency_minutes, "peak_window.frequency_minutes", min_value=2
        )

    def contains(self, hour: int) -> bool:
        """True if the hour-of-day falls inside this window."""
        return self.start_hour <= hour < self.end_hour

    @property
    def sampling_step_minutes(self) -> int:
        """Clock step used while inside this window."""
        return self.frequency_minutes // 2

    def to_dict(self) -> Dict[str, int]:
        return {
            "start_hour": self.start_hour,
            "end_hour": self.end_hour,
            "frequency_minutes": self.frequency_minutes,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PeakWindow":
        try:
            return cls(
                start_hour=data["start_hour"],
                end_hour=data["end_hour"],
                frequency_minutes=data["frequency_minutes"],
            )
        except KeyError as e:
            raise InvalidConfigurationError(
                "peak_windows", f"Peak window is missing key {e}"
            ) from e


@dataclass(frozen=True)
class ShiftWindow:
    """
    Hour range of a staffing shift.

    Hours are on a continuous operating-day axis and may exceed 24
    (an evening shift ending at 25 ends at 01:00 the next day).
    """

    start_hour: float
    end_hour: float

    def __post_init__(self) -> None:
        """Validate shift bounds after initialization."""
        validate_shift_hour(self.start_hour, "shift.start_hour")
        validate_shift_hour(self.end_hour, "shift.end_hour")
        if self.start_hour >= self.end_hour:
            raise InvalidConfigurationError(
                "shift",
                f"Shift start_hour ({self.start_hour}) must be < "
                f"end_hour ({self.end_hour})",
            )

    def contains(self, hour: float) -> bool:
        """True if the normalized hour falls inside this shift."""
        return self.start_hour <= hour < self.end_hour

    def to_dict(self) -> Dict[str, float]:
        return {"start_hour": self.start_hour, "end_hour": self.end_hour}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShiftWindow":
        try:
            return cls(start_hour=data["start_hour"], end_hour=data["end_hour"])
        except KeyError as e:
            raise InvalidConfigurationError(
                "shift", f"Shift window is missing key {e}"
            ) from e


DEFAULT_PEAK_WINDOWS: Tuple[PeakWindow, ...] = (
    PeakWindow(start_hour=8, end_hour=10, frequency_minutes=30),
    PeakWindow(start_hour=17, end_hour=20, frequency_minutes=30),
)
DEFAULT_MORNING_SHIFT = ShiftWindow(start_hour=6, end_hour=14)
DEFAULT_EVENING_SHIFT = ShiftWindow(start_hour=14, end_hour=25)


@dataclass(frozen=True)
class ScheduleConfig:
    """
    Immutable settings for one schedule generation run.

    Defaults reproduce the operator form defaults: service from 06:00
    to 01:00 the next day, morning and evening peaks, a 6-14 morning
    shift, a 14-25 evening shift and 420 working minutes per employee.

    Attributes:
        work_start: Opening time "HH:MM".
        work_end: Closing time "HH:MM"; at or before work_start means
            the next calendar day.
        peak_windows: Ordered peak windows; first match wins.
        morning_shift: Morning staffing shift.
        evening_shift: Evening staffing shift. Carried for callers and
            persistence; classification treats evening as the catch-all.
        required_work_minutes_per_employee: Working minutes one employee
            covers per shift.
        default_interval_minutes: Clock step outside peak windows.
        reference_date: Calendar date that anchors work_start.
    """

    work_start: str = "06:00"
    work_end: str = "01:00"
    peak_windows: Tuple[PeakWindow, ...] = DEFAULT_PEAK_WINDOWS
    morning_shift: ShiftWindow = DEFAULT_MORNING_SHIFT
    evening_shift: ShiftWindow = DEFAULT_EVENING_SHIFT
    required_work_minutes_per_employee: float = DEFAULT_REQUIRED_WORK_MINUTES
    default_interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    reference_date: date = REFERENCE_DATE

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        parse_clock_time(self.work_start, "work_start")
        parse_clock_time(self.work_end, "work_end")
        if not isinstance(self.peak_windows, tuple) or not all(
            isinstance(w, PeakWindow) for w in self.peak_windows
        ):
            raise InvalidConfigurationError(
                "peak_windows", "peak_windows must be a tuple of PeakWindow"
            )
        for name in ("morning_shift", "evening_shift"):
            if not isinstance(getattr(self, name), ShiftWindow):
                raise InvalidConfigurationError(
                    name, f"{name} must be a ShiftWindow"
                )
        validate_positive_number(
            self.required_work_minutes_per_employee,
            "required_work_minutes_per_employee",
        )
        validate_positive_int(self.default_interval_minutes, "default_interval_minutes")
        if not isinstance(self.reference_date, date):
            raise InvalidConfigurationError(
                "reference_date", "reference_date must be a date"
            )

    @property
    def work_start_hour(self) -> int:
        """Hour component of work_start."""
        return parse_clock_time(self.work_start, "work_start")[0]

    @classmethod
    def create(
        cls,
        work_start: str = "06:00",
        work_end: str = "01:00",
        peak_windows: Optional[Iterable[PeakWindow]] = None,
        morning_shift: Optional[ShiftWindow] = None,
        evening_shift: Optional[ShiftWindow] = None,
        required_work_minutes_per_employee: float = DEFAULT_REQUIRED_WORK_MINUTES,
        default_interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
        reference_date: Optional[date] = None,
    ) -> "ScheduleConfig":
        """
        Factory method for creating ScheduleConfig.

        Converts a peak window list to a tuple for immutability and fills
        omitted windows with the defaults.
        """
        return cls(
            work_start=work_start,
            work_end=work_end,
            peak_windows=(
                DEFAULT_PEAK_WINDOWS if peak_windows is None else tuple(peak_windows)
            ),
            morning_shift=morning_shift or DEFAULT_MORNING_SHIFT,
            evening_shift=evening_shift or DEFAULT_EVENING_SHIFT,
            required_work_minutes_per_employee=required_work_minutes_per_employee,
            default_interval_minutes=default_interval_minutes,
            reference_date=reference_date or REFERENCE_DATE,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible primitives."""
        return {
            "work_start": self.work_start,
            "work_end": self.work_end,
            "peak_windows": [w.to_dict() for w in self.peak_windows],
            "morning_shift": self.morning_shift.to_dict(),
            "evening_shift": self.evening_shift.to_dict(),
            "required_work_minutes_per_employee": self.required_work_minutes_per_employee,
            "default_interval_minutes": self.default_interval_minutes,
            "reference_date": self.reference_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScheduleConfig":
        """
        Build a config from persisted primitives.

        Missing keys fall back to the defaults; present keys must be
        valid.

        Raises:
            InvalidConfigurationError: If any present value is invalid.
        """
        defaults = cls()
        reference_date = defaults.reference_date
        if "reference_date" in data:
            try:
                reference_date = date.fromisoformat(data["reference_date"])
            except (TypeError, ValueError) as e:
                raise InvalidConfigurationError(
                    "reference_date",
                    f"reference_date must be an ISO date, got {data['reference_date']!r}",
                ) from e

        peak_windows = defaults.peak_windows
        if "peak_windows" in data:
            peak_windows = tuple(PeakWindow.from_dict(w) for w in data["peak_windows"])

        return cls(
            work_start=data.get("work_start", defaults.work_start),
            work_end=data.get("work_end", defaults.work_end),
            peak_windows=peak_windows,
            morning_shift=(
                ShiftWindow.from_dict(data["morning_shift"])
                if "morning_shift" in data
                else defaults.morning_shift
            ),
            evening_shift=(
                ShiftWindow.from_dict(data["evening_shift"])
                if "evening_shift" in data
                else defaults.evening_shift
            ),
            required_work_minutes_per_employee=data.get(
                "required_work_minutes_per_employee",
                defaults.required_work_minutes_per_employee,
            ),
            default_interval_minutes=data.get(
                "default_interval_minutes", defaults.default_interval_minutes
            ),
            reference_date=reference_date,
        )


@dataclass(frozen=True)
class ScheduleEntry:
    """
    One route's departures for an operating day.

    Attributes:
        route_id: Route the departures belong to.
        departures: Strictly increasing "HH:MM" times in operating-day
            order (times after midnight follow the evening ones).
        frequency_minutes: The route's base frequency.
    """

    route_id: str
    departures: Tuple[str, ...]
    frequency_minutes: int

    @property
    def departure_count(self) -> int:
        return len(self.departures)


@dataclass(frozen=True)
class Departure:
    """A single scheduled trip with its end time and shift."""

    route_id: str
    start_time: str
    end_time: str
    duration_minutes: int
    shift: Shift

    def to_dict(self) -> Dict[str, Any]:
        return {
            "route_id": self.route_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_minutes": self.duration_minutes,
            "shift": self.shift.value,
        }


class DepartureSchema(pa.DataFrameModel):
    """
    Schema for the tabular departure export.

    Each row is one trip of one route.
    """

    route_id: Series[str] = pa.Field(nullable=False)
    start_time: Series[str] = pa.Field(
        str_matches=r"^\d{2}:\d{2}$",
        description="Departure time HH:MM",
    )
    end_time: Series[str] = pa.Field(
        str_matches=r"^\d{2}:\d{2}$",
        description="Arrival back time HH:MM (wraps past midnight)",
    )
    duration_minutes: Series[int] = pa.Field(ge=1)
    shift: Series[str] = pa.Field(isin=[s.value for s in Shift])

    class Config:
        strict = False
        coerce = True
        name = "DepartureSchema"
        ordered = True


@dataclass(frozen=True)
class StaffingResult:
    """
    Minimum headcount per shift derived from a set of schedules.

    Derived, never persisted on its own: recomputing from the same
    schedules reproduces it exactly.
    """

    morning_staff: int
    evening_staff: int
    morning_minutes: int
    evening_minutes: int

    @property
    def total_staff(self) -> int:
        return self.morning_staff + self.evening_staff

    @property
    def total_minutes(self) -> int:
        return self.morning_minutes + self.evening_minutes

    @classmethod
    def empty(cls) -> "StaffingResult":
        return cls(morning_staff=0, evening_staff=0, morning_minutes=0, evening_minutes=0)


def _default_shift_for(start_time: str) -> Shift:
    hour, _ = parse_clock_time(start_time, "departure")
    if DEFAULT_MORNING_SHIFT.contains(hour):
        return Shift.MORNING
    return Shift.EVENING


@dataclass(frozen=True)
class ScheduleRecord:
    """
    What the schedule sink stores for one route.

    Bundles the route metadata, its departures with end times and the
    staffing figures of the run that produced it.
    """

    route_id: str
    display_name: str
    priority: float
    estimated_time: int
    frequency_minutes: int
    departures: Tuple[Departure, ...] = field(default_factory=tuple)
    morning_staff: int = 0
    evening_staff: int = 0

    @property
    def departure_times(self) -> Tuple[str, ...]:
        return tuple(d.start_time for d in self.departures)

    def to_entry(self) -> ScheduleEntry:
        """Drop the metadata and return the bare schedule entry."""
        return ScheduleEntry(
            route_id=self.route_id,
            departures=self.departure_times,
            frequency_minutes=self.frequency_minutes,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Schedule document as stored alongside the route id."""
        return {
            "departures": list(self.departure_times),
            "departures_with_end_times": [
                {
                    "start_time": d.start_time,
                    "end_time": d.end_time,
                    "shift": d.shift.value,
                }
                for d in self.departures
            ],
            "frequency": self.frequency_minutes,
            "priority": self.priority,
            "estimated_time": self.estimated_time,
            "display_id": self.display_name,
        }

    @classmethod
    def from_payload(
        cls,
        route_id: str,
        payload: Mapping[str, Any],
        morning_staff: int = 0,
        evening_staff: int = 0,
    ) -> "ScheduleRecord":
        """
        Rebuild a record from a stored schedule document.

        Documents written without shift labels get each departure
        classified against the default morning shift.

        Raises:
            KeyError: If the document lacks estimated_time or a
                departure lacks start_time or end_time.
            ValueError: If a stored shift label is unknown.
            InvalidTimeFormatError: If an unlabelled departure has a
                malformed start_time.
        """
        estimated_time = payload["estimated_time"]
        departures = tuple(
            Departure(
                route_id=route_id,
                start_time=item["start_time"],
                end_time=item["end_time"],
                duration_minutes=estimated_time,
                shift=(
                    Shift(item["shift"])
                    if item.get("shift")
                    else _default_shift_for(item["start_time"])
                ),
            )
            for item in payload.get("departures_with_end_times", [])
        )
        return cls(
            route_id=route_id,
            display_name=payload.get("display_id") or route_id,
            priority=payload.get("priority", 5.0),
            estimated_time=estimated_time,
            frequency_minutes=payload.get("frequency", 0),
            departures=departures,
            morning_staff=morning_staff,
            evening_staff=evening_staff,
        )
