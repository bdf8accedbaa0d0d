"""Ordered sequence of rows plus the unsaved-changes counter."""

from __future__ import annotations

from pi.kilo.row import TAB_STOP, Row
from pi.kilo.storage import split_lines


class Buffer:
    """The document being edited.

    Row index is the 0-based line number. ``dirty`` counts mutations since the
    last load or save; only "zero" versus "non-zero" is meaningful.
    """

    def __init__(self, filename: str | None = None, tab_stop: int = TAB_STOP) -> None:
        self.rows: list[Row] = []
        self.dirty: int = 0
        self.filename = filename
        self.tab_stop = tab_stop

    @classmethod
    def from_lines(
        cls,
        lines: list[bytes],
        filename: str | None = None,
        tab_stop: int = TAB_STOP,
    ) -> Buffer:
        """Build a clean buffer holding *lines*."""
        buf = cls(filename=filename, tab_stop=tab_stop)
        for line in lines:
            buf.insert_row(buf.numrows, line)
        buf.mark_clean()
        return buf

    @classmethod
    def from_text(
        cls,
        data: bytes | str,
        filename: str | None = None,
        tab_stop: int = TAB_STOP,
    ) -> Buffer:
        """Build a clean buffer from a whole-file string."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        return cls.from_lines(split_lines(data), filename, tab_stop)

    # -- queries ------------------------------------------------------------

    @property
    def numrows(self) -> int:
        return len(self.rows)

    @property
    def is_dirty(self) -> bool:
        return self.dirty != 0

    def row(self, at: int) -> Row | None:
        """Return row *at*, or ``None`` for the virtual row past the end."""
        if 0 <= at < len(self.rows):
            return self.rows[at]
        return None

    def lines(self) -> list[bytes]:
        return [bytes(r.chars) for r in self.rows]

    def mark_clean(self) -> None:
        self.dirty = 0

    # -- row operations -----------------------------------------------------

    def insert_row(self, at: int, text: bytes | bytearray = b"") -> None:
        if at < 0 or at > len(self.rows):
            return
        self.rows.insert(at, Row(text, self.tab_stop))
        self.dirty += 1

    def delete_row(self, at: int) -> None:
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.dirty += 1

    # -- character operations -----------------------------------------------

    def insert_char(self, row: int, col: int, byte: int) -> None:
        target = self.row(row)
        if target is None:
            return
        target.insert_char(col, byte)
        self.dirty += 1

    def delete_char(self, row: int, col: int) -> None:
        target = self.row(row)
        if target is None:
            return
        if target.delete_char(col):
            self.dirty += 1

    def append_string(self, row: int, text: bytes | bytearray) -> None:
        target = self.row(row)
        if target is None:
            return
        target.append(text)
        self.dirty += 1

    def split_at(self, row: int, col: int) -> None:
        """Break row *row* at byte *col*, pushing the suffix onto a new row."""
        if col == 0:
            self.insert_row(row, b"")
            return
        target = self.row(row)
        if target is None:
            return
        suffix = bytes(target.chars[col:])
        self.insert_row(row + 1, suffix)
        target.truncate(col)
        self.dirty += 1

    # -- cursor-level edits -------------------------------------------------

    def insert_char_at(self, cy: int, cx: int, byte: int) -> tuple[int, int]:
        """Insert *byte* at the cursor and return the new cursor ``(cx, cy)``.

        A cursor on the virtual row past the end first materialises an empty
        row there.
        """
        if cy == len(self.rows):
            self.insert_row(cy, b"")
        self.insert_char(cy, cx, byte)
        return cx + 1, cy

    def insert_newline(self, cy: int, cx: int) -> tuple[int, int]:
        """Split the line at the cursor; the cursor lands at the new line start."""
        if cy >= len(self.rows):
            self.insert_row(len(self.rows), b"")
        else:
            self.split_at(cy, cx)
        return 0, cy + 1

    def delete_char_at(self, cy: int, cx: int) -> tuple[int, int]:
        """Delete the byte before the cursor, joining lines at column 0.

        Returns the new cursor ``(cx, cy)``. At the very start of the buffer,
        or on the virtual row, nothing changes.
        """
        if cy >= len(self.rows):
            return cx, cy
        if cx == 0 and cy == 0:
            return cx, cy

        if cx > 0:
            self.delete_char(cy, cx - 1)
            return cx - 1, cy

        prev = self.rows[cy - 1]
        new_cx = prev.size
        self.append_string(cy - 1, self.rows[cy].chars)
        self.delete_row(cy)
        return new_cx, cy - 1

    # -- serialization ------------------------------------------------------

    def serialize(self) -> bytes:
        """Join rows with ``\\n``, including a newline after the last row."""
        return b"".join(bytes(r.chars) + b"\n" for r in self.rows)
