"""Departure resolution: station lookup, live vs. timetable source, filtering."""

import logging
from dataclasses import dataclass
from datetime import datetime

from .config import FALLBACK_ADVISORY, TIMETABLE_THRESHOLD
from .filters import apply_filters, filter_by_time, sort_by_time
from .matching import select_best_match
from .models import Arrival, DepartureBoard, DepartureRequest, _now
from .timetable import collect_line_stops, get_arrivals_from_timetable

logger = logging.getLogger(__name__)

SOURCE_LIVE = "live"
SOURCE_TIMETABLE = "timetable"


class StationNotFoundError(LookupError):
    """No station matched the query."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"No stations found matching '{query}'")


@dataclass
class ArrivalSelection:
    """Arrivals from whichever source was used, and how they were obtained."""
    arrivals: list[Arrival]
    source: str
    advisory: str | None = None


def should_use_timetable(target_time: datetime | None, now: datetime | None = None) -> bool:
    """Live predictions only reach ~30 minutes ahead; beyond that use timetables."""
    if target_time is None:
        return False
    now = now or _now()
    return target_time - now > TIMETABLE_THRESHOLD


def select_arrivals(
    client,
    stop_id: str,
    line_filter: str | None = None,
    target_time: datetime | None = None,
) -> ArrivalSelection:
    """
    Choose between live predictions and reconstructed timetables.

    If the timetable path yields nothing (e.g. the line publishes no static
    timetable) live predictions are used instead and an advisory is
    attached. Live results are always cut to target_time when one is given,
    which may leave nothing for far-future requests.

    On that fallback the line filter is first resolved against the lines
    serving the stop, by the same id-or-name-substring rule the timetable
    path uses, so only real line ids are requested.
    """
    if not should_use_timetable(target_time):
        arrivals = client.get_live_arrivals(stop_id, line_filter)
        return ArrivalSelection(_cut_to_target(arrivals, target_time), SOURCE_LIVE)

    arrivals = get_arrivals_from_timetable(client, stop_id, line_filter, target_time)
    if arrivals:
        return ArrivalSelection(arrivals, SOURCE_TIMETABLE)

    logger.info("No timetable departures at %s, falling back to live arrivals", stop_id)

    if line_filter:
        arrivals = []
        for line_id in resolve_line_ids(client, stop_id, line_filter):
            arrivals.extend(client.get_live_arrivals(stop_id, line_id))
    else:
        arrivals = client.get_live_arrivals(stop_id)

    return ArrivalSelection(_cut_to_target(arrivals, target_time), SOURCE_LIVE, FALLBACK_ADVISORY)


def resolve_line_ids(client, stop_id: str, line_filter: str) -> list[str]:
    """Ids of the lines at a stop (and its child stops) that pass the line filter."""
    details = client.get_stop_details(stop_id)
    line_ids = []
    for line_stop in collect_line_stops(details, line_filter):
        if line_stop.line_id not in line_ids:
            line_ids.append(line_stop.line_id)

    if not line_ids:
        logger.debug("No line at %s matches '%s'", stop_id, line_filter)
    return line_ids


def _cut_to_target(arrivals: list[Arrival], target_time: datetime | None) -> list[Arrival]:
    if target_time is not None:
        arrivals = filter_by_time(arrivals, target_time)
    return sort_by_time(arrivals)


def resolve_departures(client, request: DepartureRequest) -> DepartureBoard:
    """
    Resolve a departure request into a board for the best-matching station.

    Raises StationNotFoundError if the search finds nothing. TransportError
    from the station search or the live arrivals call propagates unchanged.
    """
    stations = client.search_stations(request.station_query)
    if not stations:
        raise StationNotFoundError(request.station_query)

    station = select_best_match(stations, request.station_query)
    logger.debug("Resolved '%s' to %s (%s)", request.station_query, station.name, station.id)

    selection = select_arrivals(client, station.id, request.line_filter, request.target_time)

    # Exact line matching only applies to direct live fetches; the fallback
    # already requested resolved line ids
    direct_live = selection.source == SOURCE_LIVE and selection.advisory is None
    exact_line = request.line_filter if direct_live else None

    arrivals = apply_filters(
        selection.arrivals,
        match_filter=request.match_filter,
        line_filter=exact_line,
        limit=request.limit,
    )
    return DepartureBoard(station=station, arrivals=arrivals, advisory=selection.advisory)
