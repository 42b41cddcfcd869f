"""Shared test fixtures and helpers for tfl-departures tests."""

import json
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import patch, MagicMock

import httpx
import pytest
from rich.console import Console

from tfl_departures.api import TransportError, parse_timetable
from tfl_departures.models import Arrival, LineRef, Station, StopDetails


# =============================================================================
# Constants
# =============================================================================


# A fixed "now" for deterministic time-based tests: Friday 14:30 local time
FIXED_NOW = datetime(2025, 3, 14, 14, 30, 0).astimezone()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def freeze_time():
    """Patch every module's _now to return FIXED_NOW for deterministic tests."""
    with patch("tfl_departures.models._now", return_value=FIXED_NOW), \
            patch("tfl_departures.timetable._now", return_value=FIXED_NOW), \
            patch("tfl_departures.departures._now", return_value=FIXED_NOW):
        yield


# =============================================================================
# Test data helpers
# =============================================================================


def make_station(id="940GZZLULVT", name="Liverpool Street Underground Station", zone="1", modes=("tube",)):
    return Station(id=id, name=name, zone=zone, modes=frozenset(modes))


def make_arrival(
    minutes=5,
    line_id="central",
    line_name="Central",
    destination="Epping Underground Station",
    platform="Eastbound - Platform 1",
):
    """Build an Arrival `minutes` after FIXED_NOW."""
    expected = FIXED_NOW + timedelta(minutes=minutes)
    return Arrival(
        line_id=line_id,
        line_name=line_name,
        destination_name=destination,
        expected_arrival=expected,
        time_to_station=int(minutes * 60),
        platform_name=platform,
    )


def make_arrival_payload(
    minutes=5,
    line_id="central",
    line_name="Central",
    destination="Epping Underground Station",
    platform="Eastbound - Platform 1",
    towards=None,
):
    """Build an Arrivals API entry `minutes` after FIXED_NOW."""
    expected = FIXED_NOW + timedelta(minutes=minutes)
    entry = {
        "lineId": line_id,
        "lineName": line_name,
        "expectedArrival": expected.isoformat(),
        "timeToStation": int(minutes * 60),
        "platformName": platform,
    }
    if destination is not None:
        entry["destinationName"] = destination
    if towards is not None:
        entry["towards"] = towards
    return entry


def make_stop_details(id="940GZZLULVT", name="Liverpool Street", lines=(("central", "Central"),), children=()):
    return StopDetails(
        id=id,
        name=name,
        lines=tuple(LineRef(line_id, line_name) for line_id, line_name in lines),
        children=tuple(children),
    )


def make_timetable_payload(
    line_id="central",
    line_name="Central",
    direction="outbound",
    stations=None,
    intervals=None,
    schedules=None,
):
    """
    Build a Line Timetable API response.

    `intervals` maps interval id -> list of stop ids; `schedules` maps
    schedule name -> list of (hour, minute, interval id).
    """
    if stations is None:
        stations = [{"id": "940GZZLUEPG", "name": "Epping Underground Station"}]
    if intervals is None:
        intervals = {"0": ["940GZZLUBNK", "940GZZLUEPG"]}
    if schedules is None:
        schedules = {"Monday - Friday": [(15, 0, "0")]}

    return {
        "lineId": line_id,
        "lineName": line_name,
        "direction": direction,
        "stations": stations,
        "timetable": {
            "departureStopId": "940GZZLULVT",
            "routes": [{
                "stationIntervals": [
                    {"id": interval_id, "intervals": [{"stopId": s, "timeToArrival": 2.0} for s in stops]}
                    for interval_id, stops in intervals.items()
                ],
                "schedules": [
                    {
                        "name": name,
                        "knownJourneys": [
                            {"hour": str(h), "minute": str(m), "intervalId": int(i)}
                            for h, m, i in journeys
                        ],
                    }
                    for name, journeys in schedules.items()
                ],
            }],
        },
    }


def make_timetable(**kwargs):
    """Build a parsed TimetableDocument; same arguments as make_timetable_payload."""
    return parse_timetable(make_timetable_payload(**kwargs))


class FakeClient:
    """
    In-memory stand-in for TflClient.

    `timetables` maps (line_id, direction) to a TimetableDocument, None
    (no timetable) or an exception to raise. Every call is recorded.
    """

    def __init__(self, stations=None, live=None, details=None, timetables=None):
        self.stations = stations if stations is not None else [make_station()]
        self.live = live if live is not None else []
        self.details = details or make_stop_details()
        self.timetables = timetables or {}
        self.calls = []

    @property
    def has_key(self) -> bool:
        return False

    def search_stations(self, query):
        self.calls.append(("search_stations", query))
        return list(self.stations)

    def get_live_arrivals(self, stop_id, line_filter=None):
        self.calls.append(("get_live_arrivals", stop_id, line_filter))
        return list(self.live)

    def get_stop_details(self, stop_id):
        self.calls.append(("get_stop_details", stop_id))
        if isinstance(self.details, Exception):
            raise self.details
        return self.details

    def get_timetable(self, line_id, stop_id, direction):
        self.calls.append(("get_timetable", line_id, stop_id, direction))
        result = self.timetables.get((line_id, direction))
        if isinstance(result, Exception):
            raise result
        return result

    def called(self, name):
        return [c for c in self.calls if c[0] == name]


def transport_error(message="TfL API error 500 while fetching"):
    return TransportError(message)


def render_to_text(renderable, width=120) -> str:
    """Capture a Rich renderable as plain text for assertion."""
    console = Console(record=True, width=width, force_terminal=False)
    console.print(renderable)
    return console.export_text()


def load_fixture(name: str):
    """Load a JSON fixture file from tests/fixtures/."""
    fixture_path = Path(__file__).parent / "fixtures" / name
    with open(fixture_path) as f:
        return json.load(f)


def make_response(json_response):
    """Create a mock httpx response that returns the given JSON."""
    response = MagicMock()
    response.json.return_value = json_response
    response.raise_for_status.return_value = None
    return response


def make_mock_httpx_client(json_response):
    """Create a mock httpx.Client that returns the given JSON from .get()."""
    mock_response = MagicMock()
    mock_response.json.return_value = json_response
    mock_response.raise_for_status.return_value = None
    mock_client = MagicMock()
    mock_client.__enter__ = MagicMock(return_value=mock_client)
    mock_client.__exit__ = MagicMock(return_value=False)
    mock_client.get.return_value = mock_response
    return mock_client


def make_mock_httpx_error(status_code):
    """Create a mock httpx.Client whose response fails raise_for_status."""
    request = httpx.Request("GET", "https://api.tfl.gov.uk/test")
    response = httpx.Response(status_code, request=request)
    mock_client = make_mock_httpx_client(None)
    mock_client.get.return_value.raise_for_status.side_effect = httpx.HTTPStatusError(
        f"{status_code}", request=request, response=response
    )
    return mock_client
