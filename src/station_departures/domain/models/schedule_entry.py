"""Schedule entry domain model."""

from dataclasses import dataclass

from station_departures.domain.models.remark import Remark
from station_departures.domain.models.trip import Trip


@dataclass(frozen=True)
class ScheduleEntry:
    """One route's current departure row on a station's board."""

    short_name: str
    delay_seconds: int
    remarks: tuple[Remark, ...]
    trips: tuple[Trip, ...]

    def __post_init__(self) -> None:
        if not self.trips:
            raise ValueError(f"Schedule entry {self.short_name!r} must have at least one trip")

    @property
    def active_trip(self) -> Trip:
        """The trip shown on the board (the next run of this route)."""
        return self.trips[0]

    @property
    def is_delayed(self) -> bool:
        return self.delay_seconds > 0
