"""API communication and payload parsing for the TfL unified API."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from .config import API_BASE, HTTP_TIMEOUT, SEARCH_MODES
from .models import (
    Arrival, Disruption, KnownJourney, LineRef, LineStatus, Schedule,
    Station, StationInterval, StopDetails, TimetableDocument, TimetableRoute,
    parse_time, seconds_until,
)

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised when a TfL API call fails (network, auth or malformed response)."""


class TflClient:
    """Synchronous client for the TfL endpoints used by the departure board."""

    def __init__(self, app_key: str = "", base_url: str = API_BASE, timeout: float = HTTP_TIMEOUT):
        self.app_key = app_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def has_key(self) -> bool:
        return bool(self.app_key)

    def _get(self, path: str, params: dict[str, str] | None = None, action: str = "") -> Any:
        """GET a path and return decoded JSON, raising TransportError on any failure."""
        query = dict(params or {})
        if self.app_key:
            query["app_key"] = self.app_key

        url = f"{self.base_url}{path}"
        logger.debug("GET %s", url)
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(url, params=query)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"TfL API error {e.response.status_code} while {action or path}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Network error while {action or path}: {e}") from e
        except ValueError as e:
            raise TransportError(f"TfL API returned a non-JSON response while {action or path}") from e

    def search_stations(self, query: str) -> list[Station]:
        """Search stop points by name, in API relevance order."""
        payload = self._get(
            f"/StopPoint/Search/{quote(query, safe='')}",
            {"modes": ",".join(SEARCH_MODES)},
            action="searching for stations",
        )
        return parse_stations(payload)

    def get_live_arrivals(self, stop_id: str, line_filter: str | None = None) -> list[Arrival]:
        """
        Live predictions at a stop, sorted by expected arrival.

        With a line filter (a TfL line id) only that line's arrivals are
        requested. A hub (HUB...) that has no predictions of its own is
        expanded into its child stops, with or without a line filter.
        """
        line_id = line_filter.strip().lower() if line_filter else None
        arrivals = self._fetch_arrivals(stop_id, line_id)

        if not arrivals and stop_id.upper().startswith("HUB"):
            details = self.get_stop_details(stop_id)
            for child in details.children:
                arrivals.extend(self._fetch_arrivals(child.id, line_id))

        arrivals.sort(key=lambda a: a.expected_arrival)
        return arrivals

    def _fetch_arrivals(self, stop_id: str, line_id: str | None) -> list[Arrival]:
        if line_id:
            path = f"/Line/{quote(line_id, safe='')}/Arrivals/{quote(stop_id, safe='')}"
        else:
            path = f"/StopPoint/{quote(stop_id, safe='')}/Arrivals"
        return parse_arrivals(self._get(path, action="fetching arrivals"))

    def get_stop_details(self, stop_id: str) -> StopDetails:
        payload = self._get(f"/StopPoint/{quote(stop_id, safe='')}", action="fetching stop details")
        if not isinstance(payload, dict):
            raise TransportError(f"Unexpected stop details for {stop_id}")
        return parse_stop_details(payload)

    def get_timetable(self, line_id: str, stop_id: str, direction: str) -> TimetableDocument | None:
        """
        Static timetable for a line from a stop in one direction.

        Returns None when the line has no published timetable (404 or an
        empty timetable payload), which is not an error. A payload that
        cannot be parsed raises TransportError.
        """
        try:
            payload = self._get(
                f"/Line/{quote(line_id, safe='')}/Timetable/{quote(stop_id, safe='')}",
                {"direction": direction},
                action=f"fetching {direction} timetable for {line_id}",
            )
        except TransportError as e:
            cause = e.__cause__
            if isinstance(cause, httpx.HTTPStatusError) and cause.response.status_code == 404:
                return None
            raise

        try:
            return parse_timetable(payload)
        except (AttributeError, TypeError, KeyError) as e:
            raise TransportError(f"Malformed {direction} timetable for {line_id}") from e

    def get_line_statuses(self, modes: tuple[str, ...] | list[str]) -> list[LineStatus]:
        payload = self._get(f"/Line/Mode/{','.join(modes)}/Status", action="fetching line status")
        return parse_line_statuses(payload)

    def get_disruptions(self, modes: tuple[str, ...] | list[str]) -> list[Disruption]:
        payload = self._get(f"/Line/Mode/{','.join(modes)}/Disruption", action="fetching disruptions")
        return parse_disruptions(payload)

    def validate_key(self) -> None:
        """Make a cheap authenticated request; raises TransportError if the key is rejected."""
        self._get("/Line/Meta/Modes", action="validating API key")


# =============================================================================
# Payload parsing
# =============================================================================


def parse_stations(payload: Any) -> list[Station]:
    """Parse a StopPoint/Search response."""
    if not isinstance(payload, dict):
        return []

    stations = []
    for match in payload.get("matches") or []:
        stop_id = match.get("id")
        name = match.get("name")
        if not stop_id or not name:
            continue
        stations.append(Station(
            id=stop_id,
            name=name,
            zone=match.get("zone") or None,
            modes=frozenset(match.get("modes") or []),
        ))
    return stations


def parse_arrivals(payload: Any) -> list[Arrival]:
    """Parse an Arrivals response. Entries without a usable timestamp are dropped."""
    if not isinstance(payload, list):
        return []

    arrivals = []
    for item in payload:
        expected = parse_time(item.get("expectedArrival"))
        if expected is None:
            continue

        time_to_station = item.get("timeToStation")
        if not isinstance(time_to_station, int):
            time_to_station = seconds_until(expected)

        arrivals.append(Arrival(
            line_id=item.get("lineId", ""),
            line_name=item.get("lineName", ""),
            destination_name=item.get("destinationName") or item.get("towards") or "",
            expected_arrival=expected,
            time_to_station=time_to_station,
            platform_name=item.get("platformName") or "",
        ))
    return arrivals


def _parse_lines(items: list[dict] | None) -> tuple[LineRef, ...]:
    return tuple(
        LineRef(id=line.get("id", ""), name=line.get("name", ""))
        for line in items or []
        if line.get("id")
    )


def parse_stop_details(payload: dict) -> StopDetails:
    """Parse a StopPoint response; children are kept one level deep."""
    children = tuple(
        StopDetails(
            id=child.get("naptanId") or child.get("id", ""),
            name=child.get("commonName") or child.get("name", ""),
            lines=_parse_lines(child.get("lines")),
        )
        for child in payload.get("children") or []
    )
    return StopDetails(
        id=payload.get("naptanId") or payload.get("id", ""),
        name=payload.get("commonName") or payload.get("name", ""),
        lines=_parse_lines(payload.get("lines")),
        children=children,
    )


def _parse_journey(journey: dict) -> KnownJourney | None:
    try:
        return KnownJourney(
            hour=int(journey.get("hour")),
            minute=int(journey.get("minute")),
            interval_id=str(journey.get("intervalId")),
        )
    except (AttributeError, TypeError, ValueError):
        return None


def parse_timetable(payload: Any) -> TimetableDocument | None:
    """Parse a Line Timetable response. Returns None if it carries no timetable."""
    if not isinstance(payload, dict):
        return None

    timetable = payload.get("timetable") or {}
    raw_routes = timetable.get("routes") or []
    if not raw_routes:
        return None

    routes = []
    for route in raw_routes:
        intervals = tuple(
            StationInterval(
                id=str(si.get("id")),
                stop_ids=tuple(i.get("stopId", "") for i in si.get("intervals") or []),
            )
            for si in route.get("stationIntervals") or []
        )
        schedules = tuple(
            Schedule(
                name=schedule.get("name", ""),
                known_journeys=tuple(
                    j for j in (_parse_journey(kj) for kj in schedule.get("knownJourneys") or [])
                    if j is not None
                ),
            )
            for schedule in route.get("schedules") or []
        )
        routes.append(TimetableRoute(station_intervals=intervals, schedules=schedules))

    return TimetableDocument(
        line_id=payload.get("lineId", ""),
        line_name=payload.get("lineName", ""),
        direction=payload.get("direction", ""),
        stations={
            s["id"]: s.get("name", "")
            for s in payload.get("stations") or []
            if s.get("id")
        },
        routes=tuple(routes),
    )


def parse_line_statuses(payload: Any) -> list[LineStatus]:
    if not isinstance(payload, list):
        return []

    statuses = []
    for line in payload:
        line_statuses = line.get("lineStatuses") or [{}]
        status = line_statuses[0]
        statuses.append(LineStatus(
            id=line.get("id", ""),
            name=line.get("name", ""),
            severity=status.get("statusSeverity", 0),
            description=status.get("statusSeverityDescription", "Unknown"),
            reason=status.get("reason") or "",
        ))
    return statuses


def parse_disruptions(payload: Any) -> list[Disruption]:
    if not isinstance(payload, list):
        return []

    return [
        Disruption(
            category=item.get("category", ""),
            category_description=item.get("categoryDescription") or item.get("category", ""),
            description=item.get("description", ""),
        )
        for item in payload
    ]
