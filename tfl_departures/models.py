"""Data model and pure time helpers for departures, stations and timetables."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .config import STATION_NAME_SUFFIXES


def _now() -> datetime:
    """Current local time (timezone-aware). Extracted for test patching."""
    return datetime.now().astimezone()


@dataclass(frozen=True)
class Station:
    """A stop point returned by station search."""
    id: str
    name: str
    zone: str | None = None
    modes: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class LineRef:
    """A line serving a stop point."""
    id: str
    name: str


@dataclass(frozen=True)
class StopDetails:
    """A stop point with the lines it serves and its per-mode child stops."""
    id: str
    name: str
    lines: tuple[LineRef, ...] = ()
    children: tuple["StopDetails", ...] = ()


@dataclass(frozen=True)
class Arrival:
    """A single departure, either predicted live or reconstructed from a timetable."""
    line_id: str
    line_name: str
    destination_name: str
    expected_arrival: datetime
    time_to_station: int  # seconds
    platform_name: str = ""

    @property
    def minutes_away(self) -> int:
        return self.time_to_station // 60


@dataclass(frozen=True)
class KnownJourney:
    hour: int
    minute: int
    interval_id: str


@dataclass(frozen=True)
class Schedule:
    """A named day-type group, e.g. "Monday - Friday"."""
    name: str
    known_journeys: tuple[KnownJourney, ...] = ()


@dataclass(frozen=True)
class StationInterval:
    """Stops reachable from an origin along a route; the last one is the destination."""
    id: str
    stop_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class TimetableRoute:
    station_intervals: tuple[StationInterval, ...] = ()
    schedules: tuple[Schedule, ...] = ()


@dataclass(frozen=True)
class TimetableDocument:
    """Static timetable for one line and direction from one stop."""
    line_id: str
    line_name: str
    direction: str
    stations: dict[str, str] = field(default_factory=dict)
    routes: tuple[TimetableRoute, ...] = ()


@dataclass(frozen=True)
class LineStatus:
    id: str
    name: str
    severity: int
    description: str
    reason: str = ""


@dataclass(frozen=True)
class Disruption:
    category: str
    category_description: str
    description: str


@dataclass(frozen=True)
class DepartureRequest:
    """What the user asked for: a station, optional filters and an optional time."""
    station_query: str
    line_filter: str | None = None
    match_filter: str | None = None
    target_time: datetime | None = None
    limit: int | None = None


@dataclass
class DepartureBoard:
    """Resolved departures for one station, plus any advisory for the user."""
    station: Station
    arrivals: list[Arrival]
    advisory: str | None = None


def parse_time(time_val: str | None) -> datetime | None:
    """Parse an ISO 8601 time string from the API."""
    if not time_val or not isinstance(time_val, str):
        return None

    try:
        return datetime.fromisoformat(time_val.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None


def parse_time_today(time_str: str) -> datetime:
    """
    Parse an HH:MM string as a time today in local time.

    Raises ValueError for anything that is not a valid 24-hour clock time.
    """
    try:
        parsed = datetime.strptime(time_str.strip(), "%H:%M")
    except (ValueError, AttributeError):
        raise ValueError("invalid time format, use HH:MM (e.g., 14:30)") from None

    return _now().replace(hour=parsed.hour, minute=parsed.minute, second=0, microsecond=0)


def time_on_day(day: datetime, hour: int, minute: int) -> datetime:
    """
    Build a datetime on the same day as `day` at hour:minute.

    Timetables use hours of 24 and above for journeys after midnight, so
    the result may fall on the following day.
    """
    midnight = day.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight + timedelta(hours=hour, minutes=minute)


def seconds_until(when: datetime, now: datetime | None = None) -> int:
    """Whole seconds from now until `when` (negative if in the past)."""
    now = now or _now()
    return int((when - now).total_seconds())


def format_clock(dt: datetime | None) -> str:
    """Format datetime as a local 24-hour clock time."""
    if not dt:
        return "—"
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.strftime("%H:%M")


def format_countdown(seconds: int) -> str:
    """Human countdown: "Due", "1 min", "12 mins", "2h", "1h 5m"."""
    mins = max(0, seconds) // 60
    if mins == 0:
        return "Due"
    if mins == 1:
        return "1 min"
    if mins < 60:
        return f"{mins} mins"
    hours, remain = divmod(mins, 60)
    if remain == 0:
        return f"{hours}h"
    return f"{hours}h {remain}m"


def clean_station_name(name: str, suffixes: tuple[str, ...] = STATION_NAME_SUFFIXES) -> str:
    """Strip well-known station suffixes (e.g. " Underground Station")."""
    for suffix in suffixes:
        if name.endswith(suffix):
            name = name[: -len(suffix)]
    return name
