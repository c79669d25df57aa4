"""Schedule API adapter."""

from station_departures.adapters.schedule_api.http_client import ScheduleHttpClient
from station_departures.adapters.schedule_api.response_parser import ScheduleParser
from station_departures.adapters.schedule_api.schedule_repository import ScheduleApiRepository

__all__ = ["ScheduleApiRepository", "ScheduleHttpClient", "ScheduleParser"]
