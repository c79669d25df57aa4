"""Projector deriving display fields from schedule records."""

from datetime import datetime
from zoneinfo import ZoneInfo

from station_departures.adapters.config.app_config import AppConfig
from station_departures.domain.contracts.display_projector import DisplayProjectorProtocol
from station_departures.domain.models.display_board import DisplayBoard
from station_departures.domain.models.display_detail import DisplayDetail
from station_departures.domain.models.display_row import DisplayRow
from station_departures.domain.models.schedule_entry import ScheduleEntry
from station_departures.domain.models.subscription_state import SubscriptionState


class DisplayProjector(DisplayProjectorProtocol):
    """Projects schedule records into rows, details and boards.

    All methods are pure: the source records are never modified and repeated
    calls return equal results.
    """

    def __init__(self, config: AppConfig) -> None:
        """Initialize the projector.

        Args:
            config: Application configuration with display timezone and board limit.
        """
        self.config = config
        self._timezone = ZoneInfo(config.timezone) if config.timezone else None

    def format_time(self, value: datetime) -> str:
        """Format an instant as HH:MM in the display timezone."""
        # astimezone(None) converts to the system local timezone
        return value.astimezone(self._timezone).strftime("%H:%M")

    def format_update_time(self, update_time: datetime | None) -> str:
        """Format last update time."""
        if not update_time:
            return "Never"
        return update_time.astimezone(self._timezone).strftime("%H:%M:%S")

    def project(self, entry: ScheduleEntry) -> DisplayRow:
        """Project a schedule entry into a board row."""
        trip = entry.active_trip
        origin = trip.origin
        return DisplayRow(
            label=entry.short_name,
            primary_time=self.format_time(origin.scheduled_departure),
            secondary_time=(
                self.format_time(origin.estimated_departure) if entry.is_delayed else None
            ),
            destination=trip.destination.stop.name,
            highlighted=len(entry.remarks) > 0,
            delayed=entry.is_delayed,
        )

    def project_detail(self, entry: ScheduleEntry) -> DisplayDetail:
        """Project a schedule entry into its expanded detail view."""
        trip = entry.active_trip
        return DisplayDetail(
            destination=trip.destination.stop.name,
            stops=tuple(
                f"{stop_time.stop.name} {self.format_time(stop_time.estimated_arrival)}"
                for stop_time in trip.stop_times
            ),
            remarks=tuple(entry.remarks),
        )

    def project_board(self, state: SubscriptionState) -> DisplayBoard:
        """Project the subscription state into a complete board."""
        routes = state.detail.routes if state.detail is not None else ()
        return DisplayBoard(
            title=state.title,
            status=state.status,
            rows=tuple(self.project(entry) for entry in routes[: self.config.board_display_limit]),
            last_update=self.format_update_time(state.last_update) if state.last_update else None,
        )
