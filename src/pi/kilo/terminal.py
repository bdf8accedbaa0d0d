"""Terminal abstraction for raw-mode byte I/O.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` backed by
the process's stdin/stdout file descriptors. Raw mode reads return after at
most a tenth of a second, so ``read_byte`` doubles as a short poll.
"""

from __future__ import annotations

import atexit
import errno
import logging
import os
import sys
import termios
from typing import Optional, Protocol

from pi.kilo.errors import InputError, TerminalError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

CLEAR_SCREEN = b"\x1b[2J\x1b[H"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
CLEAR_LINE_RIGHT = b"\x1b[K"
INVERT = b"\x1b[7m"
RESET_ATTRS = b"\x1b[m"


def cursor_to(row: int, col: int) -> bytes:
    """Escape code placing the cursor at 0-based *row*, *col*."""
    return f"\x1b[{row + 1};{col + 1}H".encode("ascii")


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def read_byte(self) -> Optional[int]: ...

    def write(self, data: bytes) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by file descriptors (stdin/stdout by default).

    ``start`` switches the input fd into raw mode; ``stop`` restores the saved
    attributes. ``stop`` is also registered with :mod:`atexit` so the terminal
    is restored on every exit path.
    """

    def __init__(
        self,
        in_fd: int | None = None,
        out_fd: int | None = None,
        read_timeout: float = 0.1,
    ) -> None:
        self._in_fd = sys.stdin.fileno() if in_fd is None else in_fd
        self._out_fd = sys.stdout.fileno() if out_fd is None else out_fd
        self._vtime = max(0, min(255, round(read_timeout * 10)))
        self._original_termios: list | None = None
        self._write_log_path: str = os.environ.get("KILO_WRITE_LOG", "")

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        return self._size().columns

    @property
    def rows(self) -> int:
        return self._size().lines

    def _size(self) -> os.terminal_size:
        try:
            size = os.get_terminal_size(self._out_fd)
        except (ValueError, OSError) as e:
            raise TerminalError(f"cannot query terminal size: {e}") from e
        if size.columns == 0 or size.lines == 0:
            raise TerminalError("terminal reported a zero size")
        return size

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Save the current attributes and enable raw mode."""
        try:
            self._original_termios = termios.tcgetattr(self._in_fd)
        except termios.error as e:
            raise TerminalError(f"tcgetattr: {e}") from e
        atexit.register(self.stop)

        raw = termios.tcgetattr(self._in_fd)
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = self._vtime

        try:
            termios.tcsetattr(self._in_fd, termios.TCSAFLUSH, raw)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {e}") from e
        logger.debug("raw mode enabled (VTIME=%d)", self._vtime)

    def stop(self) -> None:
        """Restore the attributes saved by ``start``. Safe to call twice."""
        if self._original_termios is None:
            return
        try:
            termios.tcsetattr(self._in_fd, termios.TCSAFLUSH, self._original_termios)
        except termios.error as e:
            logger.warning("could not restore terminal attributes: %s", e)
        self._original_termios = None

    # -- input --------------------------------------------------------------

    def read_byte(self) -> Optional[int]:
        """Read one byte, or return ``None`` if the raw-mode timeout expired."""
        try:
            data = os.read(self._in_fd, 1)
        except OSError as e:
            if e.errno in (errno.EAGAIN, errno.EINTR):
                return None
            raise InputError(f"read: {e.strerror or e}") from e
        if not data:
            return None
        return data[0]

    # -- output -------------------------------------------------------------

    def write(self, data: bytes) -> None:
        """Write all of *data* to the output fd."""
        view = memoryview(data)
        while view:
            n = os.write(self._out_fd, view)
            view = view[n:]

        if self._write_log_path:
            try:
                with open(self._write_log_path, "ab") as f:
                    f.write(data)
            except OSError:
                pass
