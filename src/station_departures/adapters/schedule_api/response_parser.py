"""Parser for schedule API responses.

Accepts the provider's camelCase field names (gtfsId, stoptimes,
estimatedTimeArrival, ...) as well as snake_case equivalents.
"""

import logging
import math
from datetime import UTC, datetime
from typing import Any

from station_departures.domain.models.fetch_error import MalformedResponse
from station_departures.domain.models.remark import Remark
from station_departures.domain.models.schedule_entry import ScheduleEntry
from station_departures.domain.models.station import Station
from station_departures.domain.models.station_detail import StationDetail
from station_departures.domain.models.stop_time import Stop, StopTime
from station_departures.domain.models.trip import Trip

logger = logging.getLogger(__name__)


def _first(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


class ScheduleParser:
    """Parses schedule API payloads into domain objects."""

    @staticmethod
    def parse_station_list(data: Any) -> list[Station]:
        """Parse the station list payload.

        Entries without an id or name are skipped.

        Raises:
            MalformedResponse: If the payload is not a list.
        """
        if not isinstance(data, list):
            raise MalformedResponse(
                f"Expected a list of stations, got {type(data).__name__}"
            )

        stations = []
        skipped = 0
        for item in data:
            if not isinstance(item, dict):
                skipped += 1
                continue
            station_id = _first(item, "gtfsId", "id")
            name = item.get("name")
            if station_id is None or not isinstance(name, str) or not name:
                skipped += 1
                continue
            stations.append(Station(id=str(station_id), name=name))

        if skipped:
            logger.warning(f"Skipped {skipped} malformed station entries")
        return stations

    @staticmethod
    def parse_station_detail(data: Any, station_id: str) -> StationDetail:
        """Parse the station detail payload.

        Args:
            data: Decoded JSON body.
            station_id: Requested station id, used when the payload omits it.

        Raises:
            MalformedResponse: If the payload does not match the expected shape.
        """
        if not isinstance(data, dict):
            raise MalformedResponse(
                f"Expected a station object, got {type(data).__name__}"
            )

        routes = data.get("routes")
        if not isinstance(routes, list):
            raise MalformedResponse(f"Station {station_id} has no 'routes' list")

        return StationDetail(
            id=str(_first(data, "gtfsId", "id") or station_id),
            name=str(data.get("name") or ""),
            routes=tuple(
                ScheduleParser._parse_entry(route, index) for index, route in enumerate(routes)
            ),
        )

    @staticmethod
    def _parse_entry(route: Any, index: int) -> ScheduleEntry:
        if not isinstance(route, dict):
            raise MalformedResponse(f"Route {index} is not an object")

        short_name = _first(route, "shortName", "short_name")
        if short_name is None:
            raise MalformedResponse(f"Route {index} has no shortName")

        trips = route.get("trips")
        if not isinstance(trips, list) or not trips:
            raise MalformedResponse(f"Route {short_name} has no trips")

        return ScheduleEntry(
            short_name=str(short_name),
            delay_seconds=ScheduleParser._parse_delay(
                _first(route, "delay", "delaySeconds", "delay_seconds"), short_name
            ),
            remarks=ScheduleParser._parse_remarks(route.get("remarks")),
            trips=tuple(ScheduleParser._parse_trip(trip, short_name) for trip in trips),
        )

    @staticmethod
    def _parse_delay(value: Any, short_name: Any) -> int:
        if value is None:
            return 0
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedResponse(f"Route {short_name} has a non-numeric delay: {value!r}")
        if not math.isfinite(value):
            raise MalformedResponse(f"Route {short_name} has a non-finite delay: {value!r}")
        return int(value)

    @staticmethod
    def _parse_remarks(remarks: Any) -> tuple[Remark, ...]:
        if remarks is None:
            return ()
        if not isinstance(remarks, list):
            raise MalformedResponse("'remarks' must be a list")
        parsed = []
        for remark in remarks:
            if not isinstance(remark, dict):
                raise MalformedResponse("Remark is not an object")
            parsed.append(
                Remark(
                    title=str(remark.get("title") or ""),
                    message=str(remark.get("message") or ""),
                )
            )
        return tuple(parsed)

    @staticmethod
    def _parse_trip(trip: Any, short_name: Any) -> Trip:
        if not isinstance(trip, dict):
            raise MalformedResponse(f"Trip of route {short_name} is not an object")

        stop_times = _first(trip, "stoptimes", "stopTimes", "stop_times")
        if not isinstance(stop_times, list) or not stop_times:
            raise MalformedResponse(f"Trip of route {short_name} has no stop times")

        return Trip(
            id=str(_first(trip, "gtfsId", "id") or ""),
            stop_times=tuple(ScheduleParser._parse_stop_time(st) for st in stop_times),
        )

    @staticmethod
    def _parse_stop_time(stop_time: Any) -> StopTime:
        if not isinstance(stop_time, dict):
            raise MalformedResponse("Stop time is not an object")

        stop = stop_time.get("stop")
        if not isinstance(stop, dict) or not isinstance(stop.get("name"), str):
            raise MalformedResponse("Stop time has no stop name")

        scheduled_arrival = ScheduleParser._parse_time(
            _first(stop_time, "scheduledArrival", "scheduled_arrival")
        )
        scheduled_departure = ScheduleParser._parse_time(
            _first(stop_time, "scheduledDeparture", "scheduled_departure")
        )
        # Terminal and origin stops may only carry one side of the pair
        scheduled_arrival = scheduled_arrival or scheduled_departure
        scheduled_departure = scheduled_departure or scheduled_arrival
        if scheduled_arrival is None or scheduled_departure is None:
            raise MalformedResponse(f"Stop time at {stop['name']} has no scheduled times")

        estimated_arrival = ScheduleParser._parse_time(
            _first(stop_time, "estimatedTimeArrival", "estimatedArrival", "estimated_arrival")
        )
        estimated_departure = ScheduleParser._parse_time(
            _first(
                stop_time,
                "estimatedTimeDeparture",
                "estimatedDeparture",
                "estimated_departure",
            )
        )

        return StopTime(
            stop=Stop(id=str(_first(stop, "gtfsId", "id") or ""), name=stop["name"]),
            scheduled_arrival=scheduled_arrival,
            scheduled_departure=scheduled_departure,
            estimated_arrival=estimated_arrival or scheduled_arrival,
            estimated_departure=estimated_departure or scheduled_departure,
        )

    @staticmethod
    def _parse_time(value: Any) -> datetime | None:
        """Parse an ISO-8601 string or epoch milliseconds into an aware datetime."""
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            raise MalformedResponse(f"Invalid timestamp: {value!r}")
        if isinstance(value, (int, float)):
            try:
                return datetime.fromtimestamp(value / 1000, tz=UTC)
            except (OverflowError, OSError, ValueError) as e:
                raise MalformedResponse(f"Invalid timestamp: {value!r}") from e
        if isinstance(value, str):
            try:
                parsed = datetime.fromisoformat(value)
            except ValueError as e:
                raise MalformedResponse(f"Invalid timestamp: {value!r}") from e
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=UTC)
            return parsed
        raise MalformedResponse(f"Invalid timestamp: {value!r}")
