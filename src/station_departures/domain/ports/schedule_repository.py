"""Schedule repository port."""

from typing import Protocol

from station_departures.domain.models.fetch_result import FetchResult
from station_departures.domain.models.station import Station
from station_departures.domain.models.station_detail import StationDetail


class ScheduleRepository(Protocol):
    """Port for fetching station and schedule data from the remote provider.

    Each call issues exactly one request and never retries. Failures are
    returned, not raised.
    """

    async def fetch_station_list(self) -> FetchResult[list[Station]]:
        """Fetch the full list of stations."""
        ...

    async def fetch_station_detail(self, station_id: str) -> FetchResult[StationDetail]:
        """Fetch a station with its current departure board."""
        ...
