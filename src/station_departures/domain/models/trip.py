"""Trip domain model."""

from dataclasses import dataclass

from station_departures.domain.models.stop_time import StopTime


@dataclass(frozen=True)
class Trip:
    """One scheduled run of a vehicle.

    Stop times are ordered by scheduled arrival: the first entry is the
    origin (or current stop), the last entry is the destination.
    """

    id: str
    stop_times: tuple[StopTime, ...]

    def __post_init__(self) -> None:
        if not self.stop_times:
            raise ValueError(f"Trip {self.id!r} must have at least one stop time")

    @property
    def origin(self) -> StopTime:
        return self.stop_times[0]

    @property
    def destination(self) -> StopTime:
        return self.stop_times[-1]
