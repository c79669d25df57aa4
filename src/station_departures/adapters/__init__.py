"""Adapters layer - external system integrations."""

from station_departures.adapters.config import AppConfig
from station_departures.adapters.display import DisplayProjector
from station_departures.adapters.schedule_api import ScheduleApiRepository
from station_departures.adapters.scheduling import RefreshScheduler

__all__ = [
    "AppConfig",
    "DisplayProjector",
    "RefreshScheduler",
    "ScheduleApiRepository",
]
