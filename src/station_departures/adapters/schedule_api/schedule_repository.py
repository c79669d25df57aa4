"""Schedule repository adapter backed by the schedule HTTP API."""

import logging
from typing import TYPE_CHECKING

from station_departures.adapters.config.app_config import AppConfig
from station_departures.adapters.schedule_api.http_client import ScheduleHttpClient
from station_departures.adapters.schedule_api.response_parser import ScheduleParser
from station_departures.domain.models.fetch_error import FetchError
from station_departures.domain.models.fetch_result import FetchResult
from station_departures.domain.models.station import Station
from station_departures.domain.models.station_detail import StationDetail
from station_departures.domain.ports.schedule_repository import ScheduleRepository

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientSession


class ScheduleApiRepository(ScheduleRepository):
    """Fetches stations and boards, normalizing every failure into a FetchResult."""

    def __init__(self, config: AppConfig, session: "ClientSession | None" = None) -> None:
        """Initialize with configuration and optional aiohttp session.

        Args:
            config: Application configuration with API location and timeout.
            session: Optional aiohttp ClientSession for HTTP requests.
        """
        self._http_client = ScheduleHttpClient(config, session=session)

    async def fetch_station_list(self) -> FetchResult[list[Station]]:
        """Fetch the full list of stations."""
        try:
            data = await self._http_client.fetch_station_list()
            stations = ScheduleParser.parse_station_list(data)
        except FetchError as e:
            logger.warning(f"Station list fetch failed: {e.details.reason} ({e.kind})")
            return FetchResult.failure(e)

        logger.debug(f"Fetched {len(stations)} stations")
        return FetchResult.success(stations)

    async def fetch_station_detail(self, station_id: str) -> FetchResult[StationDetail]:
        """Fetch a station with its current departure board.

        Args:
            station_id: Station identifier.
        """
        try:
            data = await self._http_client.fetch_station_detail(station_id)
            detail = ScheduleParser.parse_station_detail(data, station_id)
        except FetchError as e:
            logger.warning(
                f"Station detail fetch failed for {station_id}: {e.details.reason} ({e.kind})"
            )
            return FetchResult.failure(e)

        logger.debug(f"Fetched {len(detail.routes)} routes for station {station_id}")
        return FetchResult.success(detail)
