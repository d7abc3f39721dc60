"""bspstatus - live bspwm monitor/desktop/layout state

Parses the report lines printed by `bspc subscribe report`:
- parse_line: one report line -> WmRoot
- open_status / status: blocking iterator over snapshots
- AsyncStatusSource: asyncio variant
"""

from .client import AsyncStatusSource, StatusSource, open_status, status
from .errors import ParseError, ReadError, StartupError, StatusError
from .models import Desktop, Layout, Monitor, WmRoot
from .parser import parse_line

__all__ = [
    # Parser
    "parse_line",
    # Sources
    "StatusSource",
    "AsyncStatusSource",
    "open_status",
    "status",
    # Models
    "WmRoot",
    "Monitor",
    "Desktop",
    "Layout",
    # Errors
    "StatusError",
    "StartupError",
    "ReadError",
    "ParseError",
]
