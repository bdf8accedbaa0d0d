"""Cursor position and the visible window over the buffer."""

from __future__ import annotations

from pi.kilo.buffer import Buffer
from pi.kilo.keys import Key


class Viewport:
    """Logical cursor ``(cx, cy)`` plus scroll offsets.

    ``cx`` is a byte offset into the current row (``== size`` is the append
    position) and ``cy`` a row index (``== numrows`` is the virtual row past
    the end). ``rx`` is the render column of ``cx``; ``scroll`` recomputes it.
    """

    def __init__(self, buffer: Buffer, screen_rows: int, screen_cols: int) -> None:
        self.buffer = buffer
        self.screen_rows = screen_rows
        self.screen_cols = screen_cols
        self.cx = 0
        self.cy = 0
        self.rx = 0
        self.rowoff = 0
        self.coloff = 0

    def _row_size(self, cy: int) -> int:
        row = self.buffer.row(cy)
        return row.size if row is not None else 0

    def _snap_cx(self) -> None:
        self.cx = min(self.cx, self._row_size(self.cy))

    # -- movement -----------------------------------------------------------

    def move_cursor(self, key: int) -> None:
        """Move one step in the direction of arrow *key*."""
        numrows = self.buffer.numrows
        row = self.buffer.row(self.cy)

        if key == Key.ARROW_LEFT:
            if self.cx != 0:
                self.cx -= 1
            elif self.cy > 0:
                self.cy -= 1
                self.cx = self._row_size(self.cy)
        elif key == Key.ARROW_RIGHT:
            if row is not None and self.cx < row.size:
                self.cx += 1
            elif row is not None and self.cx == row.size:
                self.cy += 1
                self.cx = 0
        elif key == Key.ARROW_UP:
            if self.cy != 0:
                self.cy -= 1
        elif key == Key.ARROW_DOWN:
            if self.cy < numrows:
                self.cy += 1

        self._snap_cx()

    def move_home(self) -> None:
        self.cx = 0

    def move_end(self) -> None:
        row = self.buffer.row(self.cy)
        if row is not None:
            self.cx = row.size

    def page(self, key: int) -> None:
        """Jump a screenful up or down for ``PAGE_UP`` / ``PAGE_DOWN``."""
        if key == Key.PAGE_UP:
            self.cy = self.rowoff
            direction = Key.ARROW_UP
        else:
            self.cy = min(self.rowoff + self.screen_rows - 1, self.buffer.numrows)
            direction = Key.ARROW_DOWN
        self._snap_cx()
        for _ in range(self.screen_rows):
            self.move_cursor(direction)

    def set_position(self, cx: int, cy: int) -> None:
        self.cx = cx
        self.cy = cy

    # -- scrolling ----------------------------------------------------------

    def scroll(self) -> None:
        """Shift the offsets just enough to bring the cursor back on screen."""
        row = self.buffer.row(self.cy)
        self.rx = row.cx_to_rx(self.cx) if row is not None else 0

        if self.cy < self.rowoff:
            self.rowoff = self.cy
        if self.cy >= self.rowoff + self.screen_rows:
            self.rowoff = self.cy - self.screen_rows + 1
        if self.rx < self.coloff:
            self.coloff = self.rx
        if self.rx >= self.coloff + self.screen_cols:
            self.coloff = self.rx - self.screen_cols + 1

    def screen_position(self) -> tuple[int, int]:
        """Cursor position on screen, 0-based ``(row, col)``."""
        return self.cy - self.rowoff, self.rx - self.coloff
