"""Display board model handed to the rendering layer."""

from dataclasses import dataclass, field
from datetime import datetime

from station_departures.domain.models.display_row import DisplayRow
from station_departures.domain.models.subscription_state import SchedulerStatus


@dataclass(frozen=True)
class DisplayBoard:
    """Projected departure board for the active subscription."""

    title: str | None
    status: SchedulerStatus
    rows: tuple[DisplayRow, ...] = field(default_factory=tuple)
    last_update: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.status == SchedulerStatus.LOADING

    @property
    def is_refreshing(self) -> bool:
        return self.status == SchedulerStatus.REFRESHING

    @property
    def is_failed(self) -> bool:
        return self.status == SchedulerStatus.FAILED

    @property
    def is_empty(self) -> bool:
        """A successful fetch without routes, as opposed to a failed one."""
        return self.status in (SchedulerStatus.READY, SchedulerStatus.REFRESHING) and not self.rows
