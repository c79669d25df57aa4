#!/usr/bin/env python3
"""Helper script to find station IDs and preview their next departures."""

import asyncio
import sys

import aiohttp

from station_departures.adapters import AppConfig, DisplayProjector, ScheduleApiRepository
from station_departures.application.services import StationMatcher
from station_departures.domain.models import Station


def _print_station_info(station: Station) -> None:
    """Print station information."""
    print("\nFound station:")
    print(f"  ID: {station.id}")
    print(f"  Name: {station.name}")


async def find_station(name: str) -> None:
    """Find the best matching station by name."""
    config = AppConfig()
    config.load_toml()
    print(f"Searching for: {name}")

    async with aiohttp.ClientSession() as session:
        repository = ScheduleApiRepository(config, session=session)
        stations = (await repository.fetch_station_list()).unwrap()
        matches = StationMatcher(limit=1).match(name, stations)
        if not matches or not name.strip():
            print(f"Station not found: {name}")
            sys.exit(1)

        station = matches[0]
        _print_station_info(station)

        print("\nFetching sample departures...")
        result = await repository.fetch_station_detail(station.id)
        if not result.ok:
            print(f"  Could not fetch departures: {result.error}")
            return

        projector = DisplayProjector(config)
        for entry in result.unwrap().routes[:10]:
            row = projector.project(entry)
            print(f"  {row.primary_time} {row.label} → {row.destination}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python find_station.py <station_name>")
        print('Example: python find_station.py "Central"')
        sys.exit(1)

    asyncio.run(find_station(sys.argv[1]))
