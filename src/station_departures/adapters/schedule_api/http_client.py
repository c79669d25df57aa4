"""HTTP client for the schedule API.

Endpoints:
    GET {base}/stations/       -> list of stations
    GET {base}/stations/{id}   -> station with its departure board
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import aiohttp

from station_departures.adapters.api_request_logger import log_api_request, log_api_response
from station_departures.domain.models.fetch_error import (
    FetchError,
    MalformedResponse,
    NetworkUnavailable,
    NotFound,
)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

    from station_departures.adapters.config.app_config import AppConfig

logger = logging.getLogger(__name__)

_HEADERS = {"accept": "application/json"}


def _reason_for_status(status: int) -> str:
    if status == 429:
        return "Rate limit exceeded"
    if status == 502:
        return "Bad gateway (server error)"
    if status == 503:
        return "Service unavailable"
    if status == 504:
        return "Gateway timeout"
    return f"HTTP {status}"


class ScheduleHttpClient:
    """HTTP client for schedule API requests.

    Every method issues exactly one request and raises a FetchError subclass
    on failure.
    """

    def __init__(self, config: AppConfig, session: ClientSession | None = None) -> None:
        """Initialize the client.

        Args:
            config: Application configuration with API host, port and timeout.
            session: Optional shared aiohttp session. A short-lived session is
                opened per request when omitted.
        """
        self.config = config
        self._session = session

    def stations_url(self) -> str:
        return f"{self.config.api_base_url}/stations/"

    def station_url(self, station_id: str) -> str:
        return f"{self.config.api_base_url}/stations/{quote(station_id, safe=':')}"

    async def fetch_station_list(self) -> Any:
        """Fetch the raw station list payload."""
        return await self._get_json(self.stations_url())

    async def fetch_station_detail(self, station_id: str) -> Any:
        """Fetch the raw station detail payload.

        Args:
            station_id: Station identifier (e.g., "HSL:1000202").
        """
        return await self._get_json(self.station_url(station_id))

    async def _get_json(self, url: str) -> Any:
        timeout = aiohttp.ClientTimeout(total=self.config.api_timeout)
        log_api_request("GET", url, headers=_HEADERS)
        start = time.monotonic()
        try:
            if self._session is not None:
                return await self._request(self._session, url, timeout, start)
            async with aiohttp.ClientSession() as session:
                return await self._request(session, url, timeout, start)
        except FetchError:
            raise
        except TimeoutError as e:
            logger.warning(f"Schedule API request timed out after {self.config.api_timeout}s: {url}")
            raise NetworkUnavailable(f"Request timed out after {self.config.api_timeout}s") from e
        except aiohttp.ClientError as e:
            logger.warning(f"Error connecting to schedule API at {url}: {e}")
            raise NetworkUnavailable(f"Connection failed: {e}") from e

    async def _request(
        self, session: ClientSession, url: str, timeout: aiohttp.ClientTimeout, start: float
    ) -> Any:
        async with session.get(url, headers=_HEADERS, timeout=timeout) as response:
            log_api_response("GET", url, response.status, time.monotonic() - start)
            return await self._handle_response(response, url)

    async def _handle_response(self, response: ClientResponse, url: str) -> Any:
        if response.status == 404:
            raise NotFound(f"Not found: {url}", status_code=404)

        if response.status != 200:
            response_text = await response.text(errors="replace")
            logger.error(
                f"Schedule API returned status {response.status} for {url}: "
                f"{response_text[:200] or '(empty response body)'}"
            )
            raise NetworkUnavailable(_reason_for_status(response.status), status_code=response.status)

        try:
            return await response.json(content_type=None)
        except ValueError as e:
            raise MalformedResponse(f"Response from {url} is not valid JSON: {e}") from e
