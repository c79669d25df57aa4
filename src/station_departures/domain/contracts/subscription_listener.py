"""Protocol for observing subscription state changes."""

from typing import Protocol

from station_departures.domain.models.subscription_state import SubscriptionState


class SubscriptionListenerProtocol(Protocol):
    """Protocol for receiving subscription state changes."""

    def on_state_changed(self, state: SubscriptionState) -> None:
        """Handle a state change.

        Args:
            state: The scheduler's subscription state after the change.
        """
        ...
