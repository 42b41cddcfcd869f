"""Plain-dict builders for --format json output."""

import json
from typing import Any

from ..models import DepartureBoard, Disruption, LineStatus, Station, format_clock


def departures_to_dict(board: DepartureBoard) -> dict[str, Any]:
    arrivals = []
    for arrival in board.arrivals:
        entry = {
            "line": arrival.line_name,
            "line_id": arrival.line_id,
            "destination": arrival.destination_name,
            "time_to_station_seconds": arrival.time_to_station,
            "minutes_away": arrival.minutes_away,
            "expected_arrival": format_clock(arrival.expected_arrival),
        }
        if arrival.platform_name:
            entry["platform"] = arrival.platform_name
        arrivals.append(entry)

    output = {
        "station": board.station.name,
        "arrivals": arrivals,
        "count": len(arrivals),
    }
    if board.advisory:
        output["advisory"] = board.advisory
    return output


def stations_to_dict(stations: list[Station]) -> dict[str, Any]:
    entries = []
    for station in stations:
        entry = {"id": station.id, "name": station.name, "modes": sorted(station.modes)}
        if station.zone:
            entry["zone"] = station.zone
        entries.append(entry)
    return {"stations": entries, "count": len(entries)}


def line_statuses_to_dict(statuses: list[LineStatus]) -> dict[str, Any]:
    lines = []
    for status in statuses:
        entry = {
            "line": status.name,
            "line_id": status.id,
            "status": status.description,
            "severity": status.severity,
        }
        if status.reason:
            entry["reason"] = status.reason
        lines.append(entry)
    return {"lines": lines, "count": len(lines)}


def disruptions_to_dict(disruptions: list[Disruption]) -> dict[str, Any]:
    entries = [
        {"category": d.category_description, "description": d.description}
        for d in disruptions
    ]
    return {"disruptions": entries, "count": len(entries)}


def check_result_to_dict(valid: bool, message: str, error: str | None = None) -> dict[str, Any]:
    result = {"valid": valid, "message": message}
    if error:
        result["error"] = error
    return result


def error_to_dict(error: str) -> dict[str, Any]:
    return {"error": error}


def to_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)
