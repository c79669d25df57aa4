"""Refresh scheduling adapters."""

from station_departures.adapters.scheduling.refresh_scheduler import (
    RefreshScheduler,
    RefreshTrigger,
)

__all__ = ["RefreshScheduler", "RefreshTrigger"]
