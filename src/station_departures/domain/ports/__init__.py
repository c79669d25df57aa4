"""Ports (interfaces) for the ports-and-adapters architecture."""

from station_departures.domain.ports.schedule_repository import ScheduleRepository

__all__ = ["ScheduleRepository"]
