"""Error and not-found display panels."""

from rich.panel import Panel
from rich.text import Text


def build_error_panel(error: str) -> Panel:
    """Build an error display panel."""
    return Panel(
        Text(f"Error: {error}", style="bold red"),
        title="[bold red]Error[/]",
        border_style="red"
    )


def build_not_found_panel(query: str) -> Panel:
    """Build a station-not-found panel."""
    content = Text()
    content.append(f"No stations found matching '{query}'.\n\n", style="bold yellow")
    content.append("Station names are matched case-insensitively and support partial matching,\n", style="dim")
    content.append("so \"padd\" finds Paddington. Try a shorter or differently spelled name,\n", style="dim")
    content.append("or use the search command to list candidates.", style="white")

    return Panel(
        content,
        title="[bold yellow]Station Not Found[/]",
        border_style="yellow"
    )
