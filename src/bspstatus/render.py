"""Status snapshot to console renderer using Rich library."""

from rich.console import Console
from rich.style import Style
from rich.text import Text

from bspstatus import config
from bspstatus.client import open_status
from bspstatus.errors import StartupError
from bspstatus.models import Desktop, Layout, Monitor, WmRoot
from bspstatus.telemetry import get_logger

logger = get_logger(__name__)

STYLE_FOCUSED = Style(color="bright_white", bold=True)
STYLE_OCCUPIED = Style(color="cyan")
STYLE_FREE = Style(color="bright_black")
STYLE_URGENT = Style(color="red", bold=True)
STYLE_MONITOR = Style(color="yellow")
STYLE_MONITOR_FOCUSED = Style(color="yellow", bold=True, underline=True)

_LAYOUT_LABELS = {
    Layout.TILING: "[]=",
    Layout.MONOCLE: "[M]",
}


def _desktop_style(desktop: Desktop) -> Style:
    # urgent wins over focus so it stays visible on the active desktop
    if desktop.urgent:
        return STYLE_URGENT
    if desktop.focused:
        return STYLE_FOCUSED
    if desktop.occupied:
        return STYLE_OCCUPIED
    return STYLE_FREE


def _desktop_glyph(desktop: Desktop) -> str:
    if desktop.urgent:
        return config.GLYPH_URGENT
    if desktop.focused:
        return config.GLYPH_FOCUSED
    if desktop.occupied:
        return config.GLYPH_OCCUPIED
    return config.GLYPH_FREE


def render_monitor(monitor: Monitor) -> Text:
    """渲染单个 monitor: name, desktops, layout."""
    text = Text()
    text.append(monitor.name or "?", STYLE_MONITOR_FOCUSED if monitor.focused else STYLE_MONITOR)
    for desktop in monitor.desktops:
        text.append(" ")
        text.append(f"{_desktop_glyph(desktop)}{desktop.name}", _desktop_style(desktop))
    if monitor.layout is not None:
        text.append(f" {_LAYOUT_LABELS[monitor.layout]}")
    return text


def render_snapshot(snapshot: WmRoot, separator: str = " | ") -> Text:
    """渲染完整快照为一行状态栏."""
    return Text(separator).join(render_monitor(m) for m in snapshot.monitors)


def watch(console: Console | None = None, command: list[str] | None = None) -> int:
    """Print one status bar line per bspwm state change.

    Returns:
        Process exit code (0 when the stream ends, 1 when bspc cannot start).
    """
    console = console or Console()
    try:
        source = open_status(command=command)
    except StartupError as e:
        console.print(f"[red]{e}[/red]")
        return 1

    with source:
        for snapshot in source.snapshots():
            console.print(render_snapshot(snapshot))
    logger.info(f"[Watch] bspc stream ended (returncode={source.returncode})")
    return 0
