"""bspc client for subprocess-based status streaming.

`bspc subscribe report` prints one report line per bspwm state change.
StatusSource reads those lines synchronously; AsyncStatusSource does the
same on an asyncio event loop.
"""

import asyncio
import os
import subprocess
from collections.abc import AsyncIterator, Iterator, Sequence

from bspstatus import config
from bspstatus.errors import ParseError, ReadError, StartupError
from bspstatus.models import WmRoot
from bspstatus.parser import parse_line
from bspstatus.telemetry import get_logger, metrics, truncate_line

logger = get_logger(__name__)


def build_command(command: Sequence[str] | None = None) -> list[str]:
    """Build the argv for the status subprocess.

    Args:
        command: Full argv override. If None, uses `bspc subscribe report`.
    """
    if command:
        return list(command)
    return [config.BSPC_EXECUTABLE, *config.BSPC_SUBSCRIBE_ARGS]


def build_env(socket_path: str | None = None) -> dict[str, str] | None:
    """Environment for the subprocess, or None to inherit ours unchanged.

    bspc locates bspwm's socket through BSPWM_SOCKET.
    """
    socket_path = socket_path or config.BSPWM_SOCKET
    if not socket_path:
        return None
    env = dict(os.environ)
    env["BSPWM_SOCKET"] = socket_path
    return env


class StatusSource:
    """Blocking iterator over bspwm status snapshots.

    Each `next()` blocks until bspc prints a line, then parses it. A
    ParseError or ReadError is raised for that call only; calling `next()`
    again continues with the following line. StopIteration is raised once
    bspc closes its stdout.

    Usage:
        with open_status() as source:
            for snapshot in source.snapshots():
                print(snapshot.focused_monitor)
    """

    def __init__(self, process: subprocess.Popen, command: list[str]):
        if process.stdout is None:
            raise StartupError(f"stdout of {command[0]!r} is not attached")
        self._process = process
        self._stdout = process.stdout
        self._command = command

    @property
    def command(self) -> list[str]:
        return self._command

    @property
    def returncode(self) -> int | None:
        """Exit status of bspc, or None while it is running."""
        return self._process.poll()

    def __iter__(self) -> "StatusSource":
        return self

    def __next__(self) -> WmRoot:
        if self._stdout.closed:
            raise StopIteration
        # Decode per line so one bad byte only costs its own line
        try:
            raw = self._stdout.readline()
            line = raw.decode("utf-8")
        except (OSError, ValueError) as e:
            metrics.inc("source.read_errors")
            logger.error(f"[StatusSource] read failed: {e}")
            raise ReadError(f"failed to read from {self._command[0]!r}: {e}") from e

        if not line:
            logger.info(f"[StatusSource] stream closed (returncode={self.returncode})")
            raise StopIteration

        logger.debug(f"[StatusSource] line: {truncate_line(line)}")
        return parse_line(line)

    def snapshots(self, skip_errors: bool = True) -> Iterator[WmRoot]:
        """Yield snapshots until the stream ends.

        Args:
            skip_errors: If True, malformed lines and read errors are logged
                and skipped. If False, the first error propagates.

        Raises:
            ReadError: config.MAX_CONSECUTIVE_READ_ERRORS reads failed in a
                row, even with skip_errors.
        """
        read_errors = 0
        while True:
            try:
                snapshot = next(self)
            except StopIteration:
                return
            except ParseError as e:
                if not skip_errors:
                    raise
                read_errors = 0
                logger.warning(f"[StatusSource] skipping line: {e}")
                continue
            except ReadError as e:
                read_errors += 1
                if not skip_errors or read_errors >= config.MAX_CONSECUTIVE_READ_ERRORS:
                    raise
                logger.warning(f"[StatusSource] skipping line: {e}")
                continue
            read_errors = 0
            yield snapshot

    def close(self) -> None:
        """Stop reading. The bspc process itself is left alone."""
        if not self._stdout.closed:
            self._stdout.close()

    def __enter__(self) -> "StatusSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_status(
    command: Sequence[str] | None = None, socket_path: str | None = None
) -> StatusSource:
    """Start bspc and return a StatusSource over its report stream.

    Args:
        command: argv override (defaults to `bspc subscribe report`)
        socket_path: bspwm socket path passed via BSPWM_SOCKET

    Raises:
        StartupError: bspc could not be launched.
    """
    cmd = build_command(command)
    try:
        process = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            env=build_env(socket_path),
        )
    except OSError as e:
        logger.error(f"[StatusSource] failed to start {' '.join(cmd)}: {e}")
        raise StartupError(f"failed to run {cmd[0]!r}. Is bspwm installed?") from e

    logger.info(f"[StatusSource] started {' '.join(cmd)} (pid={process.pid})")
    return StatusSource(process, cmd)


# Classic entry point name
status = open_status


class AsyncStatusSource:
    """Async iterator over bspwm status snapshots.

    Same error semantics as StatusSource, on an asyncio subprocess.
    """

    def __init__(
        self, command: Sequence[str] | None = None, socket_path: str | None = None
    ):
        self._command = build_command(command)
        self._socket_path = socket_path
        self._proc: asyncio.subprocess.Process | None = None
        self._closed = False

    @property
    def command(self) -> list[str]:
        return self._command

    @property
    def returncode(self) -> int | None:
        return self._proc.returncode if self._proc else None

    async def start(self) -> None:
        """Launch bspc.

        Raises:
            StartupError: bspc could not be launched or has no stdout.
        """
        try:
            self._proc = await asyncio.create_subprocess_exec(
                *self._command,
                stdout=asyncio.subprocess.PIPE,
                env=build_env(self._socket_path),
            )
        except OSError as e:
            logger.error(f"[AsyncStatusSource] failed to start {' '.join(self._command)}: {e}")
            raise StartupError(f"failed to run {self._command[0]!r}. Is bspwm installed?") from e

        if self._proc.stdout is None:
            raise StartupError(f"stdout of {self._command[0]!r} is not attached")
        logger.info(f"[AsyncStatusSource] started {' '.join(self._command)} (pid={self._proc.pid})")

    async def read_snapshot(self) -> WmRoot | None:
        """Read and parse the next line.

        Returns:
            The parsed snapshot, or None at end of stream or after close().

        Raises:
            ParseError: The line is malformed.
            ReadError: The read failed, or start() was never called.
        """
        if self._closed:
            return None
        if self._proc is None or self._proc.stdout is None:
            raise ReadError("source is not started")

        try:
            raw = await self._proc.stdout.readline()
            line = raw.decode("utf-8")
        except (OSError, ValueError) as e:
            metrics.inc("source.read_errors")
            logger.error(f"[AsyncStatusSource] read failed: {e}")
            raise ReadError(f"failed to read from {self._command[0]!r}: {e}") from e

        if not line:
            logger.info("[AsyncStatusSource] stream closed")
            return None

        logger.debug(f"[AsyncStatusSource] line: {truncate_line(line)}")
        return parse_line(line)

    def __aiter__(self) -> "AsyncStatusSource":
        return self

    async def __anext__(self) -> WmRoot:
        snapshot = await self.read_snapshot()
        if snapshot is None:
            raise StopAsyncIteration
        return snapshot

    async def snapshots(self, skip_errors: bool = True) -> AsyncIterator[WmRoot]:
        """Yield snapshots until the stream ends, skipping bad lines.

        Gives up with ReadError after config.MAX_CONSECUTIVE_READ_ERRORS
        failed reads in a row.
        """
        read_errors = 0
        while True:
            try:
                snapshot = await self.read_snapshot()
            except ParseError as e:
                if not skip_errors:
                    raise
                read_errors = 0
                logger.warning(f"[AsyncStatusSource] skipping line: {e}")
                continue
            except ReadError as e:
                read_errors += 1
                if not skip_errors or read_errors >= config.MAX_CONSECUTIVE_READ_ERRORS:
                    raise
                logger.warning(f"[AsyncStatusSource] skipping line: {e}")
                continue
            if snapshot is None:
                return
            read_errors = 0
            yield snapshot

    async def close(self) -> None:
        """Stop reading and terminate bspc if it is still running."""
        self._closed = True
        if self._proc is None:
            return
        if self._proc.returncode is None:
            try:
                self._proc.terminate()
            except ProcessLookupError:
                pass
            await self._proc.wait()
        self._proc = None
