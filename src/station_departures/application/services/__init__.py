"""Application services."""

from station_departures.application.services.station_matcher import (
    DEFAULT_DISPLAY_LIMIT,
    MatchRank,
    StationMatcher,
    match_stations,
    normalize_name,
)
from station_departures.application.services.station_search import StationSearch

__all__ = [
    "DEFAULT_DISPLAY_LIMIT",
    "MatchRank",
    "StationMatcher",
    "StationSearch",
    "match_stations",
    "normalize_name",
]
