"""Fuzzy station matching for search-as-you-type."""

import re
import unicodedata
from collections.abc import Sequence
from enum import IntEnum

from station_departures.domain.models.station import Station

# Display-performance bound, not a data limit
DEFAULT_DISPLAY_LIMIT = 20


class MatchRank(IntEnum):
    """How closely a query matches a station name (lower is better)."""

    EQUAL = 0
    STARTS_WITH = 1
    WORD_STARTS_WITH = 2
    CONTAINS = 3
    ACRONYM = 4
    FUZZY = 5


_WORD_SEPARATORS = re.compile(r"[\W_]+")


def normalize_name(text: str) -> str:
    """Normalize text for case- and diacritic-insensitive comparison.

    "Hämeenlinna  Asema" and "hameenlinna asema" normalize to the same value.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return " ".join(stripped.casefold().split())


def _acronym(name: str) -> str:
    return "".join(word[0] for word in _WORD_SEPARATORS.split(name) if word)


class StationMatcher:
    """Ranks stations against a free-text query.

    Ranking tiers, best first: exact match, prefix, word prefix, substring,
    acronym, then in-order character subsequence. Within the subsequence tier
    a tighter span ranks higher. Ties keep the original list order.
    """

    def __init__(self, limit: int = DEFAULT_DISPLAY_LIMIT) -> None:
        """Initialize the matcher.

        Args:
            limit: Maximum number of stations returned by match().
        """
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        self._normalized: dict[str, str] = {}

    def _normalized_name(self, name: str) -> str:
        normalized = self._normalized.get(name)
        if normalized is None:
            normalized = normalize_name(name)
            self._normalized[name] = normalized
        return normalized

    @staticmethod
    def rank(query: str, name: str) -> tuple[MatchRank, int] | None:
        """Rank a normalized name against a normalized, non-empty query.

        Returns:
            (rank, spread) where spread only matters for fuzzy matches, or
            None if the name does not match at all.
        """
        if name == query:
            return MatchRank.EQUAL, 0
        if name.startswith(query):
            return MatchRank.STARTS_WITH, 0
        position = name.find(query)
        if position > 0:
            if re.search(r"(?<![^\W_])" + re.escape(query), name):
                return MatchRank.WORD_STARTS_WITH, 0
            return MatchRank.CONTAINS, 0
        if query in _acronym(name):
            return MatchRank.ACRONYM, 0

        pattern = ".*?".join(map(re.escape, query))
        found = re.search(pattern, name)
        if found:
            return MatchRank.FUZZY, len(found.group()) - len(query)
        return None

    def match(self, query: str, stations: Sequence[Station]) -> list[Station]:
        """Rank stations against a query, best match first.

        Args:
            query: Free-text query typed by the user.
            stations: Stations to search, in their original order.

        Returns:
            At most `limit` stations. With an empty query the input order is kept.
        """
        normalized_query = normalize_name(query)
        if not normalized_query:
            return list(stations[: self.limit])

        ranked: list[tuple[MatchRank, int, int, Station]] = []
        for index, station in enumerate(stations):
            result = self.rank(normalized_query, self._normalized_name(station.name))
            if result is not None:
                ranked.append((result[0], result[1], index, station))

        ranked.sort(key=lambda item: item[:3])
        return [station for _, _, _, station in ranked[: self.limit]]


def match_stations(
    query: str, stations: Sequence[Station], limit: int = DEFAULT_DISPLAY_LIMIT
) -> list[Station]:
    """Match stations with a throwaway matcher."""
    return StationMatcher(limit=limit).match(query, stations)
