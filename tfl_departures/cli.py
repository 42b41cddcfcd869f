#!/usr/bin/env python3
"""
tfl — Transport for London departures CLI

Departure boards, line status and disruptions from the TfL unified API
(https://api.tfl.gov.uk).

Usage:
    tfl departures "Liverpool Street"       # Live departures
    tfl departures Paddington Central -n 5  # Filter by line, limit results
    tfl departures Stratford -m westbound   # Filter by destination/platform text
    tfl departures Bank -t 18:30            # Departures from a later time
    tfl search "King's Cross"               # Search for stations
    tfl status                              # Tube line status
    tfl disruptions                         # Current disruptions
    tfl check                               # Validate the API key
"""

import argparse
import logging
import sys

from rich.console import Console

from .api import TflClient, TransportError
from .config import DEFAULT_STATUS_MODES, Config
from .departures import StationNotFoundError, resolve_departures
from .display import (
    build_departures_table, build_disruptions_panel, build_error_panel,
    build_line_status_table, build_not_found_panel, build_stations_table,
    check_result_to_dict, departures_to_dict, disruptions_to_dict,
    error_to_dict, line_statuses_to_dict, stations_to_dict, to_json,
)
from .models import DepartureRequest, parse_time_today

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tfl",
        description="Transport for London CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Station names are matched case-insensitively and support partial matching,
so "paddington", "Paddington", and "padd" will all find Paddington station.

The API key can be provided via the TFL_APP_KEY environment variable or --key.
        """
    )
    parser.add_argument(
        "--key",
        metavar="KEY",
        help="TfL API key (or set TFL_APP_KEY env var)"
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log API requests and source selection to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    departures = subparsers.add_parser(
        "departures",
        help="Show departures from a station",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    tfl departures "Liverpool Street"
    tfl departures Paddington Central -n 5
    tfl departures Paddington elizabeth -m "platform 1"
    tfl departures Bank -t 18:30

Requests more than 30 minutes ahead use the published timetable.
        """
    )
    departures.add_argument("station", help="Station name (partial matches allowed)")
    departures.add_argument("line", nargs="?", help="Only show this line (e.g. Central)")
    departures.add_argument(
        "-n", "--limit",
        type=int,
        default=0,
        help="Maximum number of departures to show"
    )
    departures.add_argument(
        "-m", "--match",
        metavar="TEXT",
        help="Only show departures whose line, destination or platform contains all words"
    )
    departures.add_argument(
        "-t", "--time",
        metavar="HH:MM",
        help="Show departures from this time today"
    )

    search = subparsers.add_parser("search", help="Search for stations")
    search.add_argument("station", help="Station name to search for")

    status = subparsers.add_parser("status", help="Show line status")
    status.add_argument(
        "--modes",
        default=",".join(DEFAULT_STATUS_MODES),
        help="Comma-separated transport modes (default: tube)"
    )

    disruptions = subparsers.add_parser(
        "disruptions", aliases=["delays"], help="Show service disruptions"
    )
    disruptions.add_argument(
        "--modes",
        default=",".join(DEFAULT_STATUS_MODES),
        help="Comma-separated transport modes (default: tube)"
    )

    subparsers.add_parser("check", help="Check if API key is configured and valid")

    return parser


def _split_modes(value: str) -> list[str]:
    return [m.strip() for m in value.split(",") if m.strip()]


def _print_json(console: Console, data: dict) -> None:
    console.out(to_json(data), highlight=False)


def _report_error(config: Config, console: Console, err_console: Console, message: str) -> int:
    if config.is_json:
        _print_json(console, error_to_dict(message))
    else:
        err_console.print(build_error_panel(message))
    return 1


def cmd_departures(args, config: Config, client: TflClient, console: Console, err_console: Console) -> int:
    try:
        target_time = parse_time_today(args.time) if args.time else None
    except ValueError as e:
        return _report_error(config, console, err_console, str(e))

    request = DepartureRequest(
        station_query=args.station,
        line_filter=args.line,
        match_filter=args.match,
        target_time=target_time,
        limit=args.limit,
    )

    try:
        board = resolve_departures(client, request)
    except StationNotFoundError as e:
        if config.is_json:
            _print_json(console, error_to_dict(str(e)))
        else:
            err_console.print(build_not_found_panel(e.query))
        return 1
    except TransportError as e:
        return _report_error(config, console, err_console, str(e))

    if config.is_json:
        _print_json(console, departures_to_dict(board))
    else:
        console.print(build_departures_table(board))
    return 0


def cmd_search(args, config: Config, client: TflClient, console: Console, err_console: Console) -> int:
    try:
        stations = client.search_stations(args.station)
    except TransportError as e:
        return _report_error(config, console, err_console, str(e))

    if config.is_json:
        _print_json(console, stations_to_dict(stations))
    else:
        console.print(build_stations_table(stations))
    return 0


def cmd_status(args, config: Config, client: TflClient, console: Console, err_console: Console) -> int:
    try:
        statuses = client.get_line_statuses(_split_modes(args.modes))
    except TransportError as e:
        return _report_error(config, console, err_console, str(e))

    if config.is_json:
        _print_json(console, line_statuses_to_dict(statuses))
    else:
        console.print(build_line_status_table(statuses))
    return 0


def cmd_disruptions(args, config: Config, client: TflClient, console: Console, err_console: Console) -> int:
    try:
        disruptions = client.get_disruptions(_split_modes(args.modes))
    except TransportError as e:
        return _report_error(config, console, err_console, str(e))

    if config.is_json:
        _print_json(console, disruptions_to_dict(disruptions))
    else:
        console.print(build_disruptions_panel(disruptions))
    return 0


def cmd_check(args, config: Config, client: TflClient, console: Console, err_console: Console) -> int:
    if not client.has_key:
        if config.is_json:
            _print_json(console, check_result_to_dict(False, "No API key configured"))
        else:
            err_console.print("[red]No API key configured.[/]")
            err_console.print("[dim]Set TFL_APP_KEY environment variable or use --key flag.[/]")
        return 1

    try:
        client.validate_key()
    except TransportError as e:
        if config.is_json:
            _print_json(console, check_result_to_dict(False, "API key validation failed", str(e)))
        else:
            err_console.print(build_error_panel(f"API key validation failed: {e}"))
        return 1

    if config.is_json:
        _print_json(console, check_result_to_dict(True, "API key is valid"))
    else:
        console.print("[green]✓ API key is valid[/]")
    return 0


COMMANDS = {
    "departures": cmd_departures,
    "search": cmd_search,
    "status": cmd_status,
    "disruptions": cmd_disruptions,
    "delays": cmd_disruptions,
    "check": cmd_check,
}


def run(argv: list[str] | None = None, console: Console | None = None, err_console: Console | None = None) -> int:
    """Parse arguments, run one command and return its exit status."""
    args = build_parser().parse_args(argv)
    config = Config.from_args(args.key, args.output_format, args.verbose)

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    console = console or Console()
    err_console = err_console or Console(stderr=True)
    client = TflClient(app_key=config.app_key)

    logger.debug("Running '%s' (API key %s)", args.command, "set" if client.has_key else "not set")
    return COMMANDS[args.command](args, config, client, console, err_console)


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
