"""Station disambiguation for free-text queries."""

from typing import Sequence

from .models import Station


def select_best_match(candidates: Sequence[Station], query: str) -> Station:
    """
    Pick the best station for a query from API search results.

    Case-insensitive, in priority order: the first exact name match, then
    the first name containing the query, then the first candidate (the
    API's own relevance order). `candidates` must not be empty.
    """
    query = query.lower()

    for station in candidates:
        if station.name.lower() == query:
            return station

    for station in candidates:
        if query in station.name.lower():
            return station

    return candidates[0]
