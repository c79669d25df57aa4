"""Subscription state for the currently viewed station."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from station_departures.domain.models.fetch_error import FetchError
from station_departures.domain.models.station_detail import StationDetail


class SchedulerStatus(str, Enum):
    """Lifecycle of a station subscription."""

    IDLE = "idle"
    LOADING = "loading"  # First load, no prior data
    READY = "ready"
    REFRESHING = "refreshing"  # Prior data present, fetch in flight
    FAILED = "failed"  # Fetch attempted, no data ever obtained


@dataclass
class SubscriptionState:
    """State owned by the refresh scheduler for its active subscription."""

    station_id: str | None = None
    station_name: str | None = None
    status: SchedulerStatus = SchedulerStatus.IDLE
    detail: StationDetail | None = None
    title: str | None = None
    last_update: datetime | None = None
    last_error: FetchError | None = None
    fetch_count: int = 0

    @property
    def has_data(self) -> bool:
        return self.detail is not None

    @property
    def is_busy(self) -> bool:
        return self.status in (SchedulerStatus.LOADING, SchedulerStatus.REFRESHING)
