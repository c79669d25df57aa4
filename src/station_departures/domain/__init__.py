"""Domain layer - core models, ports and contracts."""

from station_departures.domain.models import (
    ScheduleEntry,
    Station,
    StationDetail,
    StopTime,
    Trip,
)
from station_departures.domain.ports import ScheduleRepository

__all__ = [
    "ScheduleEntry",
    "ScheduleRepository",
    "Station",
    "StationDetail",
    "StopTime",
    "Trip",
]
