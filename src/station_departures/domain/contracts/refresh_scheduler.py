"""Protocol for keeping a subscribed station's schedule fresh."""

from typing import Protocol

from station_departures.domain.models.subscription_state import SubscriptionState


class RefreshSchedulerProtocol(Protocol):
    """Protocol for polling a single subscribed station."""

    @property
    def state(self) -> SubscriptionState:
        """Current subscription state."""
        ...

    async def subscribe(self, station_id: str, station_name: str) -> None:
        """Start polling a station, replacing any previous subscription.

        Args:
            station_id: Identifier of the station to poll.
            station_name: Name shown as the board title once data arrives.
        """
        ...

    def refresh(self) -> bool:
        """Request a manual refresh.

        Returns:
            True if a fetch was issued, False if the request was a no-op.
        """
        ...

    async def unsubscribe(self, station_id: str | None = None) -> None:
        """Stop polling and discard any in-flight fetch.

        Args:
            station_id: Only unsubscribe if this is the active station (None for any).
        """
        ...
