"""tfl-departures: London station departure boards from the TfL unified API."""

__version__ = "0.1.0"
