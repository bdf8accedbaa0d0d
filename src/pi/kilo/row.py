"""A single line of text and its tab-expanded render form.

``chars`` holds the authoritative bytes of the line (no trailing newline).
``render`` is derived from ``chars`` by expanding every tab to the next
multiple of the tab stop; any other byte occupies exactly one column.
"""

from __future__ import annotations

TAB = 0x09
TAB_STOP = 8


def compute_render(chars: bytes | bytearray, tab_stop: int = TAB_STOP) -> bytes:
    """Expand tabs in *chars* into spaces, measured in render columns."""
    if TAB not in chars:
        return bytes(chars)

    out = bytearray()
    for byte in chars:
        if byte == TAB:
            out.append(0x20)
            while len(out) % tab_stop != 0:
                out.append(0x20)
        else:
            out.append(byte)
    return bytes(out)


def cx_to_rx(chars: bytes | bytearray, cx: int, tab_stop: int = TAB_STOP) -> int:
    """Project byte offset *cx* onto its render column."""
    rx = 0
    for byte in chars[:cx]:
        if byte == TAB:
            rx += (tab_stop - 1) - (rx % tab_stop)
        rx += 1
    return rx


def rx_to_cx(chars: bytes | bytearray, rx: int, tab_stop: int = TAB_STOP) -> int:
    """Return the byte offset whose render span covers column *rx*.

    Columns past the end of the line map to ``len(chars)``.
    """
    cur_rx = 0
    for cx, byte in enumerate(chars):
        if byte == TAB:
            cur_rx += (tab_stop - 1) - (cur_rx % tab_stop)
        cur_rx += 1
        if cur_rx > rx:
            return cx
    return len(chars)


class Row:
    """One buffer line.

    Every mutator recomputes ``render`` before returning, so ``render`` is
    never stale when read.
    """

    __slots__ = ("chars", "render", "tab_stop")

    def __init__(self, chars: bytes | bytearray = b"", tab_stop: int = TAB_STOP) -> None:
        self.chars = bytearray(chars)
        self.tab_stop = tab_stop
        self.render = b""
        self.update()

    def __repr__(self) -> str:
        return f"Row({bytes(self.chars)!r})"

    @property
    def size(self) -> int:
        return len(self.chars)

    @property
    def rsize(self) -> int:
        return len(self.render)

    def update(self) -> None:
        self.render = compute_render(self.chars, self.tab_stop)

    def cx_to_rx(self, cx: int) -> int:
        return cx_to_rx(self.chars, cx, self.tab_stop)

    # -- mutation -----------------------------------------------------------

    def insert_char(self, at: int, byte: int) -> None:
        """Splice *byte* in at *at*; out-of-range positions append."""
        if at < 0 or at > self.size:
            at = self.size
        self.chars.insert(at, byte)
        self.update()

    def delete_char(self, at: int) -> bool:
        """Remove the byte at *at*. Returns False when *at* is out of range."""
        if at < 0 or at >= self.size:
            return False
        del self.chars[at]
        self.update()
        return True

    def append(self, data: bytes | bytearray) -> None:
        self.chars.extend(data)
        self.update()

    def truncate(self, at: int) -> bytes:
        """Cut the row at *at* and return the removed suffix."""
        suffix = bytes(self.chars[at:])
        del self.chars[at:]
        self.update()
        return suffix
