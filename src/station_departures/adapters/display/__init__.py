"""Display adapters."""

from station_departures.adapters.display.display_projector import DisplayProjector

__all__ = ["DisplayProjector"]
