"""bspwm report line parser.

Converts one line of `bspc subscribe report` output into a WmRoot.

Line format::

    W<marker><payload>:<marker><payload>:...

The leading sentinel character is dropped. Each section's first character
is a marker; its case encodes focus (uppercase = focused):

- M/m: monitor
- O/o: occupied desktop
- F/f: free desktop
- U/u: urgent desktop
- L: layout of the current monitor (T = tiling, M = monocle)

Other markers are skipped so newer bspwm fields do not break parsing.
"""

from bspstatus import config
from bspstatus.errors import ParseError
from bspstatus.models import Desktop, Layout, Monitor, WmRoot
from bspstatus.telemetry import get_logger, metrics

logger = get_logger(__name__)

# marker (lowercase) -> (occupied, urgent)
_DESKTOP_MARKERS = {
    "o": (True, False),
    "f": (False, False),
    "u": (True, True),
}

_MONITOR_MARKER = "m"
_LAYOUT_MARKER = "L"


def parse_line(line: str) -> WmRoot:
    """Parse one report line into a WmRoot.

    Args:
        line: A report line, with or without its line terminator.

    Returns:
        WmRoot with monitors in report order.

    Raises:
        ParseError: The line is empty, holds an empty section, or places a
            desktop/layout field before any monitor field.
    """
    text = line.rstrip("\r\n")
    if not text:
        metrics.inc("parser.errors", {"reason": "empty_line"})
        raise ParseError(text, "empty line")

    metrics.inc("parser.lines")
    monitors: list[Monitor] = []

    # Sentinel only: nothing to report
    body = text[1:]
    if not body:
        return WmRoot(monitors=monitors)

    for position, section in enumerate(body.split(config.FIELD_SEP)):
        if not section:
            metrics.inc("parser.errors", {"reason": "empty_section"})
            raise ParseError(text, "empty section", position)

        marker, payload = section[0], section[1:]
        kind = marker.lower()

        if kind == _MONITOR_MARKER:
            monitors.append(Monitor(name=payload, focused=marker.isupper()))
            continue

        if kind in _DESKTOP_MARKERS or marker == _LAYOUT_MARKER:
            if not monitors:
                metrics.inc("parser.errors", {"reason": "no_monitor"})
                raise ParseError(text, f"{marker!r} field before any monitor", position)
            current = monitors[-1]

            if marker == _LAYOUT_MARKER:
                current.layout = Layout.from_code(payload)
            else:
                occupied, urgent = _DESKTOP_MARKERS[kind]
                current.desktops.append(
                    Desktop(
                        name=payload,
                        focused=marker.isupper(),
                        occupied=occupied,
                        urgent=urgent,
                    )
                )
            continue

        # Unknown marker (e.g. T/G state fields of newer bspwm)
        metrics.inc("parser.unknown_marker", {"marker": marker})
        logger.debug(f"[Parser] skipping unknown marker {marker!r} in section {position}")

    return WmRoot(monitors=monitors)
