"""Stop and stop time domain models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Stop:
    """A stop served by a trip."""

    id: str
    name: str


@dataclass(frozen=True)
class StopTime:
    """Scheduled and estimated arrival/departure of a trip at one stop.

    When the owning entry has no delay, estimated times equal the scheduled ones.
    """

    stop: Stop
    scheduled_arrival: datetime
    scheduled_departure: datetime
    estimated_arrival: datetime
    estimated_departure: datetime
