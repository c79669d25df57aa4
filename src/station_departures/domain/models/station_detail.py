"""Station detail domain model."""

from dataclasses import dataclass

from station_departures.domain.models.schedule_entry import ScheduleEntry


@dataclass(frozen=True)
class StationDetail:
    """A station together with its departure board.

    Each successful detail fetch produces a new instance that fully replaces
    the previous one.
    """

    id: str
    name: str
    routes: tuple[ScheduleEntry, ...]
