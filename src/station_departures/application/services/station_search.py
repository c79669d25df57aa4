"""Station search session backing the station picker."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from station_departures.application.services.station_matcher import StationMatcher

if TYPE_CHECKING:
    from station_departures.domain.models.fetch_error import FetchError
    from station_departures.domain.models.station import Station
    from station_departures.domain.ports import ScheduleRepository

logger = logging.getLogger(__name__)


class StationSearch:
    """Owns the station list, the query text and the loading flag.

    The station list is fetched once per activation and treated as read-only
    until the next forced reload.
    """

    def __init__(
        self,
        repository: ScheduleRepository,
        matcher: StationMatcher | None = None,
    ) -> None:
        """Initialize the search session.

        Args:
            repository: Repository used to fetch the station list.
            matcher: Matcher used to rank stations (defaults to a 20-result matcher).
        """
        self._repository = repository
        self.matcher = matcher or StationMatcher()
        self.stations: list[Station] = []
        self.query = ""
        self.loading = False
        self.loaded = False
        self.last_error: FetchError | None = None

    async def load(self, force: bool = False) -> bool:
        """Fetch the station list unless it is already loaded.

        Args:
            force: Fetch again even if a list was already loaded.

        Returns:
            True if a station list is available after the call.
        """
        if self.loading:
            logger.debug("Station list load already in progress")
            return self.loaded
        if self.loaded and not force:
            return True

        self.loading = True
        try:
            result = await self._repository.fetch_station_list()
        finally:
            self.loading = False

        if result.error is not None:
            logger.error(f"Failed to load station list: {result.error}")
            self.last_error = result.error
            if not self.loaded:
                self.stations = []
            return self.loaded

        # Replace wholesale, never merge
        self.stations = list(result.unwrap())
        self.loaded = True
        self.last_error = None
        logger.info(f"Loaded {len(self.stations)} stations")
        return True

    def set_query(self, text: str) -> None:
        self.query = text

    def clear(self) -> None:
        """Reset the query, e.g. when the search view loses focus."""
        self.query = ""

    @property
    def results(self) -> list[Station]:
        """Stations matching the current query, best match first."""
        return self.matcher.match(self.query, self.stations)

    @property
    def shows_no_results(self) -> bool:
        """True when a non-empty query produced nothing to show."""
        return bool(self.query.strip()) and not self.loading and not self.results

    @staticmethod
    def select(station: Station) -> tuple[str, str]:
        """Return the (station_id, station_name) pair used to subscribe."""
        return station.id, station.name
