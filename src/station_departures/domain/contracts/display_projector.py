"""Protocol for deriving display fields from schedule records."""

from datetime import datetime
from typing import Protocol

from station_departures.domain.models.display_board import DisplayBoard
from station_departures.domain.models.display_detail import DisplayDetail
from station_departures.domain.models.display_row import DisplayRow
from station_departures.domain.models.schedule_entry import ScheduleEntry
from station_departures.domain.models.subscription_state import SubscriptionState


class DisplayProjectorProtocol(Protocol):
    """Protocol for projecting schedule records into display types."""

    def format_time(self, value: datetime) -> str:
        """Format an instant as 24-hour HH:MM in the display timezone.

        Args:
            value: The instant to format.

        Returns:
            Time string like "14:30".
        """
        ...

    def project(self, entry: ScheduleEntry) -> DisplayRow:
        """Project a schedule entry into a board row.

        Args:
            entry: The schedule entry to project.

        Returns:
            The display row for the entry's active trip.
        """
        ...

    def project_detail(self, entry: ScheduleEntry) -> DisplayDetail:
        """Project a schedule entry into its expanded detail view.

        Args:
            entry: The schedule entry to project.

        Returns:
            Destination, per-stop estimated arrivals and remarks.
        """
        ...

    def project_board(self, state: SubscriptionState) -> DisplayBoard:
        """Project the subscription state into a complete board.

        Args:
            state: The scheduler's current subscription state.

        Returns:
            Title, status and capped rows for rendering.
        """
        ...
