"""Line status and disruption displays."""

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models import Disruption, LineStatus
from .lines import line_badge

GOOD_SERVICE = 10


def get_severity_style(severity: int) -> str:
    """Green for good service, yellow for minor problems (6-9), red otherwise."""
    if severity == GOOD_SERVICE:
        return "green"
    if 6 <= severity <= 9:
        return "yellow"
    return "red"


def get_category_style(category: str) -> tuple[str, str]:
    """Icon and colour for a disruption category."""
    if category == "RealTime":
        return "!", "red"
    if category == "PlannedWork":
        return "W", "yellow"
    return "i", "cyan"


def build_line_status_table(statuses: list[LineStatus]) -> Panel:
    table = Table(show_header=False, box=None, expand=True, padding=(0, 1))
    table.add_column("Line", no_wrap=True)
    table.add_column("Status")

    for status in statuses:
        cell = Text(status.description, style=get_severity_style(status.severity))
        if status.reason:
            cell.append(f"\n{status.reason}", style="dim")
        table.add_row(line_badge(status.id, status.name), cell)

    return Panel(table, title="[bold]Line Status[/]", border_style="blue")


def build_disruptions_panel(disruptions: list[Disruption]) -> Panel | Text:
    if not disruptions:
        return Text("No current disruptions", style="bold green")

    items = []
    for disruption in disruptions:
        icon, style = get_category_style(disruption.category)
        entry = Text()
        entry.append(f"[{icon}] ", style=style)
        entry.append(disruption.category_description, style="bold")
        entry.append(f"\n    {disruption.description}\n")
        items.append(entry)

    return Panel(
        Group(*items),
        title=f"[bold]Service Disruptions ({len(disruptions)})[/]",
        border_style="yellow",
    )
