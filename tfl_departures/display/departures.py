"""Departure board display."""

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models import DepartureBoard, format_clock, format_countdown
from .lines import line_badge


def _countdown_text(seconds: int) -> Text:
    countdown = format_countdown(seconds)
    if countdown == "Due":
        return Text(countdown, style="bold green")
    if countdown == "1 min":
        return Text(countdown, style="green")
    return Text(countdown)


def build_departures_table(board: DepartureBoard) -> Panel | Group:
    """Build the departure board, or a not-found message when it is empty."""
    advisory = Text(f"Note: {board.advisory}", style="yellow") if board.advisory else None

    if not board.arrivals:
        message = Text(f"No arrivals found for {board.station.name}", style="yellow")
        return Group(advisory, message) if advisory else Group(message)

    table = Table(
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
        expand=True,
    )

    table.add_column("Line", no_wrap=True)
    table.add_column("Time", width=6, justify="center")
    table.add_column("Due", width=8)
    table.add_column("Destination", min_width=20)
    table.add_column("Platform", style="dim")

    for arrival in board.arrivals:
        table.add_row(
            line_badge(arrival.line_id, arrival.line_name),
            Text(format_clock(arrival.expected_arrival), style="cyan"),
            _countdown_text(arrival.time_to_station),
            Text(arrival.destination_name, style="bold"),
            arrival.platform_name or "-",
        )

    panel = Panel(
        table,
        title=f"[bold]Departures from {board.station.name}[/]",
        border_style="blue",
    )
    return Group(advisory, panel) if advisory else panel
