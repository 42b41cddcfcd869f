"""Line colours and the fixed-width line badge shared by the table views."""

from rich.text import Text

LINE_STYLES = {
    "bakerloo": "bright_white on rgb(178,99,0)",
    "central": "bright_white on rgb(220,36,31)",
    "circle": "black on rgb(255,211,0)",
    "district": "bright_white on rgb(0,125,50)",
    "hammersmith-city": "black on rgb(244,169,190)",
    "jubilee": "black on rgb(161,165,167)",
    "metropolitan": "bright_white on rgb(155,0,88)",
    "northern": "bright_white on rgb(0,0,0)",
    "piccadilly": "bright_white on rgb(0,54,136)",
    "victoria": "bright_white on rgb(0,160,226)",
    "waterloo-city": "black on rgb(147,206,186)",
    "elizabeth": "bright_white on rgb(107,63,160)",
    "dlr": "bright_white on rgb(0,175,173)",
    "london-overground": "black on rgb(239,123,16)",
}
DEFAULT_LINE_STYLE = "bright_white on rgb(100,100,100)"

LINE_NAME_WIDTH = 14


def get_line_style(line_id: str) -> str:
    return LINE_STYLES.get(line_id, DEFAULT_LINE_STYLE)


def format_line_name(name: str) -> str:
    """Pad or truncate a line name to the badge width."""
    if len(name) > LINE_NAME_WIDTH:
        return f" {name[:LINE_NAME_WIDTH - 2]}.. "
    return f" {name:<{LINE_NAME_WIDTH}} "


def line_badge(line_id: str, name: str) -> Text:
    return Text(format_line_name(name), style=get_line_style(line_id))
