"""Command line interface for searching stations and showing departure boards."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import TYPE_CHECKING, TextIO

import aiohttp

from station_departures.adapters.config import AppConfig
from station_departures.adapters.display import DisplayProjector
from station_departures.adapters.schedule_api import ScheduleApiRepository
from station_departures.adapters.scheduling import RefreshScheduler
from station_departures.application.services import StationMatcher, StationSearch
from station_departures.domain.models import SchedulerStatus

if TYPE_CHECKING:
    from station_departures.domain.models import (
        DisplayBoard,
        DisplayDetail,
        Station,
        SubscriptionState,
    )


def format_board(board: DisplayBoard) -> str:
    """Render a projected board as plain text."""
    title = board.title or "Departures"
    if board.is_loading:
        return f"{title}\nLoading..."
    if board.is_failed:
        return f"{title}\nCould not load departures."

    header = title if board.last_update is None else f"{title} (updated {board.last_update})"
    if board.is_empty:
        return f"{header}\nNo results..."

    lines = [header, f"{'Train No.':<10} {'Departure':<14} To"]
    for row in board.rows:
        time_text = row.primary_time
        if row.secondary_time is not None:
            time_text = f"{row.primary_time}->{row.secondary_time}"
        marker = " (!)" if row.highlighted else ""
        lines.append(f"{row.label:<10} {time_text:<14} {row.destination}{marker}")
    return "\n".join(lines)


def format_detail(label: str, detail: DisplayDetail) -> str:
    """Render a projected entry detail as plain text."""
    lines = [f"{label} to {detail.destination}", "  " + " | ".join(detail.stops)]
    if detail.remarks:
        lines.append("  Remarks")
        lines.extend(f"    {remark.title}: {remark.message}" for remark in detail.remarks)
    return "\n".join(lines)


def format_stations(stations: list[Station]) -> str:
    lines = [f"\nFound {len(stations)} station(s):\n"]
    for station in stations:
        lines.append(f"  {station.name}")
        lines.append(f"    ID: {station.id}")
    return "\n".join(lines)


class BoardPrinter:
    """Prints the projected board whenever a fetch has completed."""

    def __init__(self, projector: DisplayProjector, out: TextIO = sys.stdout) -> None:
        self.projector = projector
        self.out = out
        self._last_fetch_count = -1

    def on_state_changed(self, state: SubscriptionState) -> None:
        if state.is_busy or state.status == SchedulerStatus.IDLE:
            return
        if state.fetch_count == self._last_fetch_count:
            return
        self._last_fetch_count = state.fetch_count
        print(format_board(self.projector.project_board(state)), file=self.out, flush=True)
        print(file=self.out, flush=True)


async def search_stations(
    config: AppConfig, query: str, session: aiohttp.ClientSession
) -> list[Station]:
    """Load the station list and return the stations matching a query.

    Raises:
        FetchError: If the station list could not be loaded.
    """
    search = StationSearch(
        ScheduleApiRepository(config, session=session),
        StationMatcher(limit=config.search_display_limit),
    )
    if not await search.load() and search.last_error is not None:
        raise search.last_error
    search.set_query(query)
    return search.results


async def show_board(
    config: AppConfig,
    station_id: str,
    station_name: str,
    session: aiohttp.ClientSession,
    show_detail: bool = False,
    out: TextIO = sys.stdout,
) -> bool:
    """Fetch a board once and print it.

    Returns:
        True if the board was loaded.
    """
    projector = DisplayProjector(config)
    async with RefreshScheduler(ScheduleApiRepository(config, session=session), config) as scheduler:
        await scheduler.subscribe(station_id, station_name)
        await scheduler.wait_for_fetch()
        state = scheduler.state
        print(format_board(projector.project_board(state)), file=out)
        if show_detail and state.detail is not None:
            for entry in state.detail.routes[: config.board_display_limit]:
                print(file=out)
                print(format_detail(entry.short_name, projector.project_detail(entry)), file=out)
        return state.status == SchedulerStatus.READY


async def watch_board(
    config: AppConfig,
    station_id: str,
    station_name: str,
    session: aiohttp.ClientSession,
) -> None:
    """Subscribe to a station and print the board after every refresh until interrupted."""
    printer = BoardPrinter(DisplayProjector(config))
    scheduler = RefreshScheduler(ScheduleApiRepository(config, session=session), config, printer)
    try:
        await scheduler.subscribe(station_id, station_name)
        await asyncio.Event().wait()
    finally:
        await scheduler.unsubscribe()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="station-departures",
        description="Search stations and show live departure boards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search for stations
  station-departures search "cent"

  # Show the departure board once
  station-departures board HSL:1000202 --name "Central" --detail

  # Keep the board up to date
  station-departures watch HSL:1000202 --name "Central"
        """,
    )
    parser.add_argument("--config", help="Path to TOML configuration file")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    search_parser = subparsers.add_parser("search", help="Search for stations")
    search_parser.add_argument("query", help="Station name to search for")
    search_parser.add_argument("--json", action="store_true", help="Output as JSON")

    board_parser = subparsers.add_parser("board", help="Show a departure board once")
    board_parser.add_argument("station_id", help="Station ID")
    board_parser.add_argument("--name", help="Station name shown as title")
    board_parser.add_argument(
        "--detail", action="store_true", help="Show stops and remarks per departure"
    )

    watch_parser = subparsers.add_parser("watch", help="Keep a departure board up to date")
    watch_parser.add_argument("station_id", help="Station ID")
    watch_parser.add_argument("--name", help="Station name shown as title")

    return parser


async def run(args: argparse.Namespace) -> int:
    """Execute a parsed command.

    Returns:
        Process exit code.
    """
    config = AppConfig()
    if args.config:
        config.config_file = args.config
    config.load_toml()

    async with aiohttp.ClientSession() as session:
        if args.command == "search":
            results = await search_stations(config, args.query, session)
            if args.json:
                payload = [{"id": s.id, "name": s.name} for s in results]
                print(json.dumps(payload, indent=2, ensure_ascii=False))
                return 0
            if not results:
                print(f"No stations found for '{args.query}'", file=sys.stderr)
                return 1
            print(format_stations(results))
            return 0

        station_name = args.name or args.station_id
        if args.command == "board":
            loaded = await show_board(
                config, args.station_id, station_name, session, show_detail=args.detail
            )
            return 0 if loaded else 1

        await watch_board(config, args.station_id, station_name, session)
        return 0


async def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        return await run(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
