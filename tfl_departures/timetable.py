"""Reconstruct scheduled departures from static line timetables."""

import logging
from dataclasses import dataclass
from datetime import datetime

from .api import TransportError
from .config import TIMETABLE_DIRECTIONS, TIMETABLE_LOOKAHEAD
from .models import (
    Arrival, StopDetails, TimetableDocument, TimetableRoute,
    _now, clean_station_name, seconds_until, time_on_day,
)

logger = logging.getLogger(__name__)

# Stop codes whose names are not always present in timetable station lists
STOP_CODE_NAMES = {
    "940GZZLUWRP": "West Ruislip",
    "940GZZLUEBY": "Ealing Broadway",
    "940GZZLUEAN": "East Acton",
    "940GZZLUNOA": "North Acton",
    "940GZZLUWCY": "White City",
    "940GZZLUHLT": "Hainault",
    "940GZZLUEPG": "Epping",
}

STOP_ID_PREFIXES = ("940GZZLU", "910G")

# Day-type matching works on lowercased schedule names, Monday == 0
SATURDAY, SUNDAY, FRIDAY = 5, 6, 4


@dataclass(frozen=True)
class LineStop:
    """A line to look up and the stop to request its timetable from."""
    line_id: str
    line_name: str
    stop_id: str


def line_matches(line_id: str, line_name: str, line_filter: str | None) -> bool:
    """A line passes the filter if its id equals it or its name contains it."""
    if not line_filter:
        return True
    wanted = line_filter.strip().lower()
    return line_id.lower() == wanted or wanted in line_name.lower()


def collect_line_stops(details: StopDetails, line_filter: str | None = None) -> list[LineStop]:
    """
    List the (line, stop) pairs served at a station, child stops first.

    A station may group separate sub-stops per mode (e.g. tube and rail
    platforms under one hub), each with its own lines.
    """
    line_stops = []
    for child in details.children:
        for line in child.lines:
            if line_matches(line.id, line.name, line_filter):
                line_stops.append(LineStop(line.id, line.name, child.id))

    for line in details.lines:
        if line_matches(line.id, line.name, line_filter):
            line_stops.append(LineStop(line.id, line.name, details.id))

    return line_stops


def schedule_matches_day(schedule_name: str, weekday: int) -> bool:
    """
    Whether a timetable day-type group applies to a weekday (Monday == 0).

    Schedule names are free text such as "Monday - Friday", "Monday - Thursday",
    "Friday", "Saturday" or "Sunday".
    """
    name = schedule_name.lower()

    if weekday == SATURDAY:
        return "saturday" in name
    if weekday == SUNDAY:
        return "sunday" in name
    if weekday == FRIDAY:
        return "friday" in name or ("monday" in name and "friday" in name)
    return "monday" in name


def format_stop_id(stop_id: str) -> str:
    """Readable name for a stop id missing from every fetched timetable."""
    if stop_id in STOP_CODE_NAMES:
        return STOP_CODE_NAMES[stop_id]

    for prefix in STOP_ID_PREFIXES:
        if stop_id.startswith(prefix):
            stop_id = stop_id[len(prefix):]
    return stop_id


def build_destination_map(route: TimetableRoute, station_names: dict[str, str]) -> dict[str, str]:
    """Map each interval id of a route to the name of its final stop."""
    destinations = {}
    for interval in route.station_intervals:
        if not interval.stop_ids:
            continue
        last_stop = interval.stop_ids[-1]
        destinations[interval.id] = station_names.get(last_stop) or format_stop_id(last_stop)
    return destinations


def parse_timetable_with_stations(
    timetable: TimetableDocument,
    min_time: datetime,
    station_names: dict[str, str],
) -> list[Arrival]:
    """
    Turn one timetable document into departures for today.

    Only schedules for today's day type are used, and only journeys between
    min_time and min_time + TIMETABLE_LOOKAHEAD are kept.
    """
    if timetable is None or not timetable.routes:
        return []

    now = _now()
    max_time = min_time + TIMETABLE_LOOKAHEAD
    arrivals = []

    for route in timetable.routes:
        destinations = build_destination_map(route, station_names)

        for schedule in route.schedules:
            if not schedule_matches_day(schedule.name, now.weekday()):
                continue

            for journey in schedule.known_journeys:
                depart_time = time_on_day(now, journey.hour, journey.minute)

                if depart_time < min_time or depart_time > max_time:
                    continue

                destination = destinations.get(journey.interval_id) or timetable.direction
                arrivals.append(Arrival(
                    line_id=timetable.line_id,
                    line_name=timetable.line_name,
                    destination_name=destination,
                    expected_arrival=depart_time,
                    time_to_station=seconds_until(depart_time, now),
                ))

    return arrivals


def fetch_timetables(client, line_stops: list[LineStop]) -> list[TimetableDocument]:
    """
    Fetch inbound and outbound timetables once per distinct line.

    A direction that fails or has no published timetable is skipped; the
    remaining documents are still returned.
    """
    timetables = []
    seen: set[str] = set()
    skipped = 0

    for line_stop in line_stops:
        if line_stop.line_id in seen:
            continue
        seen.add(line_stop.line_id)

        for direction in TIMETABLE_DIRECTIONS:
            try:
                timetable = client.get_timetable(line_stop.line_id, line_stop.stop_id, direction)
            except TransportError as e:
                logger.warning("Skipping %s timetable for %s: %s", direction, line_stop.line_id, e)
                skipped += 1
                continue

            if timetable is None:
                logger.debug("No %s timetable published for %s", direction, line_stop.line_id)
                skipped += 1
                continue

            timetables.append(timetable)

    if skipped:
        logger.debug("Skipped %d timetable fetches for %d lines", skipped, len(seen))
    return timetables


def merge_station_names(timetables: list[TimetableDocument]) -> dict[str, str]:
    """Combine the station name lists of every document, with suffixes stripped."""
    names = {}
    for timetable in timetables:
        for stop_id, name in timetable.stations.items():
            names[stop_id] = clean_station_name(name)
    return names


def get_arrivals_from_timetable(client, stop_id: str, line_filter: str | None, min_time: datetime) -> list[Arrival]:
    """
    Reconstruct departures at a stop from static timetables, sorted by time.

    Station names are merged across all fetched documents before any
    destination is resolved, since interval data in one document may refer
    to a station only named in another.
    """
    details = client.get_stop_details(stop_id)
    line_stops = collect_line_stops(details, line_filter)
    timetables = fetch_timetables(client, line_stops)
    station_names = merge_station_names(timetables)

    arrivals = []
    for timetable in timetables:
        arrivals.extend(parse_timetable_with_stations(timetable, min_time, station_names))

    arrivals.sort(key=lambda a: a.expected_arrival)
    logger.debug("Reconstructed %d departures from %d timetables", len(arrivals), len(timetables))
    return arrivals
