"""Main entry point for the station departures command line."""

import asyncio
import logging
import os
import sys

from station_departures.cli import main as cli_main


def configure_logging() -> None:
    """Configure logging to stderr, level taken from LOG_LEVEL (default WARNING)."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def main() -> None:
    """Synchronous entry point for the console script."""
    configure_logging()
    try:
        sys.exit(asyncio.run(cli_main()))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
