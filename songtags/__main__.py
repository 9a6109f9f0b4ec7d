"""
songtags - Entry Point

Run with: python -m songtags
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from songtags import __version__
from songtags.config import AppConfig, load_config
from songtags.server import SongTagsServer


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="songtags",
        description="songtags - tag songs with labels and filter them with AND semantics",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML config file (default: ./songtags.toml if present)",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host address to bind to (default: 127.0.0.1)",
    )

    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=None,
        help="HTTP port (default: 8080)",
    )

    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to the SQLite database (default: songtags.sqlite3)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """Load the config file and apply command line overrides."""
    config = load_config(args.config)
    return config.with_overrides(host=args.host, port=args.port, db_path=args.db)


async def run_server(config: AppConfig) -> None:
    """Start and run the songtags server."""
    server = SongTagsServer(config)
    await server.run()


def main() -> int:
    """Main entry point for the application."""
    args = parse_args()
    setup_logging(verbose=args.verbose)

    logger = logging.getLogger(__name__)

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        logger.error("Could not load configuration: %s", e)
        return 2

    logger.info("Starting songtags...")

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user")
    except Exception as e:
        logger.exception("Fatal error: %s", e)
        return 1

    logger.info("Server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
