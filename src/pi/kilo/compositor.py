"""Frame composition: buffer, status line and message line in one write.

Each refresh builds the complete escape-coded frame in memory and hands it
to the terminal in a single ``write`` call, so the screen never shows a
half-drawn frame.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from pi.kilo import __version__
from pi.kilo.buffer import Buffer
from pi.kilo.terminal import (
    CLEAR_LINE_RIGHT,
    CURSOR_HOME,
    HIDE_CURSOR,
    INVERT,
    RESET_ATTRS,
    SHOW_CURSOR,
    Terminal,
    cursor_to,
)
from pi.kilo.utils import truncate_to_width, visible_width
from pi.kilo.viewport import Viewport

FILLER = b"~"
NO_NAME = "[No Name]"
FILENAME_WIDTH = 20
MESSAGE_TIMEOUT = 5.0


def _encode(text: str) -> bytes:
    return text.encode("utf-8", errors="replace")


@dataclass
class StatusMessage:
    """Most recent message-line text and when it was set."""

    text: str = ""
    set_at: float = 0.0


class Compositor:
    """Render ``Buffer`` + ``Viewport`` state onto a ``Terminal``."""

    def __init__(
        self,
        terminal: Terminal,
        buffer: Buffer,
        viewport: Viewport,
        *,
        message_timeout: float = MESSAGE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.terminal = terminal
        self.buffer = buffer
        self.viewport = viewport
        self.message_timeout = message_timeout
        self.message = StatusMessage()
        self._clock = clock

    def set_status_message(self, text: str) -> None:
        self.message = StatusMessage(text, self._clock())

    # -- frame --------------------------------------------------------------

    def refresh(self) -> None:
        """Scroll the viewport to the cursor and emit one full frame."""
        self.viewport.scroll()
        self.terminal.write(self.render_frame())

    def render_frame(self) -> bytes:
        out: list[bytes] = [HIDE_CURSOR, CURSOR_HOME]

        self._draw_rows(out)
        self._draw_status_bar(out)
        self._draw_message_bar(out)

        row, col = self.viewport.screen_position()
        out.append(cursor_to(row, col))
        out.append(SHOW_CURSOR)
        return b"".join(out)

    # -- sections -----------------------------------------------------------

    def _welcome_line(self, width: int) -> bytes:
        welcome = f"Kilo editor -- version {__version__}"
        welcome = truncate_to_width(welcome, width)
        padding = (width - visible_width(welcome)) // 2
        line = b""
        if padding:
            line += FILLER
            padding -= 1
        return line + b" " * padding + _encode(welcome)

    def _draw_rows(self, out: list[bytes]) -> None:
        vp = self.viewport
        numrows = self.buffer.numrows

        for y in range(vp.screen_rows):
            filerow = y + vp.rowoff
            if filerow >= numrows:
                if numrows == 0 and y == vp.screen_rows // 3:
                    out.append(self._welcome_line(vp.screen_cols))
                else:
                    out.append(FILLER)
            else:
                render = self.buffer.rows[filerow].render
                out.append(render[vp.coloff : vp.coloff + vp.screen_cols])

            out.append(CLEAR_LINE_RIGHT)
            out.append(b"\r\n")

    def _draw_status_bar(self, out: list[bytes]) -> None:
        width = self.viewport.screen_cols
        name = self.buffer.filename
        name = truncate_to_width(name, FILENAME_WIDTH) if name else NO_NAME
        modified = " (modified)" if self.buffer.is_dirty else ""
        left = f"{name} - {self.buffer.numrows} lines{modified}"
        right = f"{self.viewport.cy + 1}/{self.buffer.numrows}"

        left = truncate_to_width(left, width)
        used = visible_width(left)
        right_width = visible_width(right)

        line = left
        while used < width:
            if width - used == right_width:
                line += right
                break
            line += " "
            used += 1

        out.append(INVERT)
        out.append(_encode(line))
        out.append(RESET_ATTRS)
        out.append(b"\r\n")

    def _draw_message_bar(self, out: list[bytes]) -> None:
        out.append(CLEAR_LINE_RIGHT)
        msg = self.message
        if msg.text and self._clock() - msg.set_at < self.message_timeout:
            out.append(_encode(truncate_to_width(msg.text, self.viewport.screen_cols)))
