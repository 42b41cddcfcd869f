"""Display rendering components for tfl-departures."""

from .departures import build_departures_table
from .stations import build_stations_table
from .status import build_line_status_table, build_disruptions_panel
from .errors import build_error_panel, build_not_found_panel
from .json_output import (
    departures_to_dict, stations_to_dict, line_statuses_to_dict,
    disruptions_to_dict, check_result_to_dict, error_to_dict, to_json,
)

__all__ = [
    "build_departures_table",
    "build_stations_table",
    "build_line_status_table",
    "build_disruptions_panel",
    "build_error_panel",
    "build_not_found_panel",
    "departures_to_dict",
    "stations_to_dict",
    "line_statuses_to_dict",
    "disruptions_to_dict",
    "check_result_to_dict",
    "error_to_dict",
    "to_json",
]
