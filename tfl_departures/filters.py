"""Filtering, ordering and truncation of departure lists."""

from datetime import datetime

from .models import Arrival


def sort_by_time(arrivals: list[Arrival]) -> list[Arrival]:
    """Stable sort by expected arrival."""
    return sorted(arrivals, key=lambda a: a.expected_arrival)


def filter_by_match(arrivals: list[Arrival], match: str | None) -> list[Arrival]:
    """
    Fuzzy filter on line, destination and platform.

    Every whitespace-separated word of `match` must appear somewhere in the
    combined "line destination platform" text; the words may be spread
    across different fields. An empty match keeps everything.
    """
    words = (match or "").lower().split()
    if not words:
        return list(arrivals)

    filtered = []
    for arrival in arrivals:
        search_text = f"{arrival.line_name} {arrival.destination_name} {arrival.platform_name}".lower()
        if all(word in search_text for word in words):
            filtered.append(arrival)
    return filtered


def filter_by_line(arrivals: list[Arrival], line: str | None) -> list[Arrival]:
    """Keep arrivals whose line name (or line id) equals `line`, ignoring case."""
    if not line:
        return list(arrivals)

    wanted = line.strip().lower()
    return [
        a for a in arrivals
        if a.line_name.lower() == wanted or a.line_id.lower() == wanted
    ]


def filter_by_time(arrivals: list[Arrival], min_time: datetime) -> list[Arrival]:
    """Drop arrivals expected before `min_time`."""
    return [a for a in arrivals if a.expected_arrival >= min_time]


def apply_filters(
    arrivals: list[Arrival],
    match_filter: str | None = None,
    line_filter: str | None = None,
    limit: int | None = None,
) -> list[Arrival]:
    """
    Run the departure filter pipeline.

    `line_filter` is the exact-name filter for line-scoped live fetches;
    callers pass None for all-lines or timetable results. The list is kept
    ordered by expected arrival after each stage and truncated to `limit`
    last.
    """
    result = sort_by_time(arrivals)

    if match_filter:
        result = sort_by_time(filter_by_match(result, match_filter))

    if line_filter:
        result = sort_by_time(filter_by_line(result, line_filter))

    if limit and 0 < limit < len(result):
        result = result[:limit]

    return result
