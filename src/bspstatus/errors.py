"""Errors raised while opening, reading and parsing the bspwm report stream."""


class StatusError(Exception):
    """Base class for all bspstatus errors."""


class StartupError(StatusError):
    """bspc could not be launched or its stdout could not be attached."""


class ReadError(StatusError):
    """Reading the next report line failed.

    Recoverable: the source can be polled again.
    """


class ParseError(StatusError):
    """A report line is malformed.

    Attributes:
        line: The offending line (without terminator)
        position: Zero-based index of the bad section, or None for whole-line errors
        reason: Human-readable cause
    """

    def __init__(self, line: str, reason: str, position: int | None = None):
        self.line = line
        self.reason = reason
        self.position = position
        where = f" at section {position}" if position is not None else ""
        super().__init__(f"{reason}{where}: {line!r}")
