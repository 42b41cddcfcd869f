"""Station search results display."""

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models import Station


def build_stations_table(stations: list[Station]) -> Panel | Text:
    """Build the station search results table."""
    if not stations:
        return Text("No stations found", style="yellow")

    table = Table(
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
        expand=True,
    )

    table.add_column("Station", min_width=30, style="cyan")
    table.add_column("Zone", width=6, justify="center")
    table.add_column("Modes")
    table.add_column("ID", style="dim")

    for station in stations:
        table.add_row(
            station.name,
            station.zone or "-",
            ", ".join(sorted(station.modes)),
            station.id,
        )

    return Panel(table, title="[bold]Stations found[/]", border_style="magenta")
