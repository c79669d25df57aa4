"""Domain models for station departures."""

from station_departures.domain.models.display_board import DisplayBoard
from station_departures.domain.models.display_detail import DisplayDetail
from station_departures.domain.models.display_row import DisplayRow
from station_departures.domain.models.error_details import ErrorDetails
from station_departures.domain.models.fetch_error import (
    FetchError,
    MalformedResponse,
    NetworkUnavailable,
    NotFound,
)
from station_departures.domain.models.fetch_result import FetchResult
from station_departures.domain.models.remark import Remark
from station_departures.domain.models.schedule_entry import ScheduleEntry
from station_departures.domain.models.station import Station
from station_departures.domain.models.station_detail import StationDetail
from station_departures.domain.models.stop_time import Stop, StopTime
from station_departures.domain.models.subscription_state import (
    SchedulerStatus,
    SubscriptionState,
)
from station_departures.domain.models.trip import Trip

__all__ = [
    "DisplayBoard",
    "DisplayDetail",
    "DisplayRow",
    "ErrorDetails",
    "FetchError",
    "FetchResult",
    "MalformedResponse",
    "NetworkUnavailable",
    "NotFound",
    "Remark",
    "ScheduleEntry",
    "SchedulerStatus",
    "Station",
    "StationDetail",
    "Stop",
    "StopTime",
    "SubscriptionState",
    "Trip",
]
