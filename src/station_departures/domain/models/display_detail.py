"""Display detail model handed to the rendering layer."""

from dataclasses import dataclass

from station_departures.domain.models.remark import Remark


@dataclass(frozen=True)
class DisplayDetail:
    """Expanded view of a single schedule entry."""

    destination: str
    stops: tuple[str, ...]  # "<stop name> <HH:MM>" per stop, in trip order
    remarks: tuple[Remark, ...]
