"""Contracts (protocols) implemented by adapters."""

from station_departures.domain.contracts.display_projector import DisplayProjectorProtocol
from station_departures.domain.contracts.refresh_scheduler import RefreshSchedulerProtocol
from station_departures.domain.contracts.subscription_listener import (
    SubscriptionListenerProtocol,
)

__all__ = [
    "DisplayProjectorProtocol",
    "RefreshSchedulerProtocol",
    "SubscriptionListenerProtocol",
]
