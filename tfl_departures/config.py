"""Configuration constants and dataclass for tfl-departures."""

import os
from dataclasses import dataclass
from datetime import timedelta

# API constants
API_BASE = "https://api.tfl.gov.uk"
HTTP_TIMEOUT = 10.0  # seconds
APP_KEY_ENV = "TFL_APP_KEY"

# Modes offered by station search and the status commands
SEARCH_MODES = ("tube", "dlr", "overground", "elizabeth-line", "national-rail")
DEFAULT_STATUS_MODES = ("tube",)

# Requests further ahead than this use static timetables instead of live predictions
TIMETABLE_THRESHOLD = timedelta(minutes=30)
# Reconstructed timetable departures are kept up to this long after the requested time
TIMETABLE_LOOKAHEAD = timedelta(hours=4)

TIMETABLE_DIRECTIONS = ("inbound", "outbound")

# Stripped from timetable station names for display
STATION_NAME_SUFFIXES = (" Underground Station", " Rail Station", " DLR Station")

FALLBACK_ADVISORY = (
    "Timetable unavailable for this line. "
    "Real-time data only covers ~30 minutes ahead."
)


@dataclass
class Config:
    """Runtime configuration built from CLI arguments."""
    app_key: str = ""
    output_format: str = "text"
    verbose: bool = False

    @property
    def is_json(self) -> bool:
        return self.output_format == "json"

    @classmethod
    def from_args(cls, app_key: str | None, output_format: str, verbose: bool = False) -> "Config":
        """Build config, falling back to the TFL_APP_KEY environment variable."""
        key = app_key or os.environ.get(APP_KEY_ENV, "")
        return cls(app_key=key.strip(), output_format=output_format, verbose=verbose)
