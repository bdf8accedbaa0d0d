"""Raw keyboard input decoding.

Turns a byte-at-a-time read primitive into logical key events. Plain bytes
are their own key codes; VT100/xterm escape sequences for the navigation
keys map onto the ``Key`` constants above the byte range.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ReadByte = Callable[[], Optional[int]]

ESC = 0x1B


def ctrl_key(ch: str) -> int:
    """Return the code sent by Ctrl plus the letter *ch*."""
    return ord(ch) & 0x1F


# ---------------------------------------------------------------------------
# Key constants
# ---------------------------------------------------------------------------


class Key:
    """Named key codes. Values above 255 never collide with a raw byte."""

    ESCAPE = ESC
    ENTER = 0x0D
    BACKSPACE = 0x7F
    TAB = 0x09

    ARROW_LEFT = 1000
    ARROW_RIGHT = 1001
    ARROW_UP = 1002
    ARROW_DOWN = 1003
    DEL = 1004
    HOME = 1005
    END = 1006
    PAGE_UP = 1007
    PAGE_DOWN = 1008

    CTRL_H = ctrl_key("h")
    CTRL_L = ctrl_key("l")
    CTRL_Q = ctrl_key("q")
    CTRL_S = ctrl_key("s")


ARROW_KEYS = (Key.ARROW_UP, Key.ARROW_DOWN, Key.ARROW_LEFT, Key.ARROW_RIGHT)

# Escape-sequence tails (the bytes after ESC) -> key codes
ESCAPE_SEQUENCES: dict[bytes, int] = {
    b"[A": Key.ARROW_UP,
    b"[B": Key.ARROW_DOWN,
    b"[C": Key.ARROW_RIGHT,
    b"[D": Key.ARROW_LEFT,
    b"[H": Key.HOME,
    b"[F": Key.END,
    b"OH": Key.HOME,
    b"OF": Key.END,
    b"[1~": Key.HOME,
    b"[3~": Key.DEL,
    b"[4~": Key.END,
    b"[5~": Key.PAGE_UP,
    b"[6~": Key.PAGE_DOWN,
    b"[7~": Key.HOME,
    b"[8~": Key.END,
}

_KEY_NAMES: dict[int, str] = {
    Key.ESCAPE: "escape",
    Key.ENTER: "enter",
    Key.BACKSPACE: "backspace",
    Key.TAB: "tab",
    Key.ARROW_LEFT: "left",
    Key.ARROW_RIGHT: "right",
    Key.ARROW_UP: "up",
    Key.ARROW_DOWN: "down",
    Key.DEL: "delete",
    Key.HOME: "home",
    Key.END: "end",
    Key.PAGE_UP: "pageUp",
    Key.PAGE_DOWN: "pageDown",
}


def key_name(key: int) -> str:
    """Human-readable name for *key*, e.g. ``"up"``, ``"ctrl+q"`` or ``"a"``."""
    name = _KEY_NAMES.get(key)
    if name is not None:
        return name
    if 0 <= key < 0x20:
        return f"ctrl+{chr(key + 0x60)}"
    if 0x20 <= key < 0x7F:
        return chr(key)
    return f"0x{key:02x}"


def decode_escape_tail(tail: bytes) -> int:
    """Map the bytes following ESC onto a key; unknown tails are a bare escape."""
    key = ESCAPE_SEQUENCES.get(tail)
    if key is None:
        logger.warning("unrecognised escape sequence %r", tail)
        return Key.ESCAPE
    return key


def _is_digit(byte: int) -> bool:
    return 0x30 <= byte <= 0x39


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------


class KeyDecoder:
    """Produce one logical key per ``read_key`` call.

    *read_byte* returns the next input byte, or ``None`` when its own timeout
    expired without input. Any exception it raises propagates unchanged.
    """

    def __init__(self, read_byte: ReadByte) -> None:
        self._read_byte = read_byte

    def read_key(self) -> int:
        byte = self._read_byte()
        while byte is None:
            byte = self._read_byte()

        if byte != ESC:
            return byte

        first = self._read_byte()
        if first is None:
            return Key.ESCAPE
        second = self._read_byte()
        if second is None:
            return Key.ESCAPE

        tail = bytes((first, second))
        if first == ord("[") and _is_digit(second):
            third = self._read_byte()
            if third is None:
                return Key.ESCAPE
            tail += bytes((third,))

        return decode_escape_tail(tail)


class _ByteSource:
    """Read primitive over a fixed byte string; exhausted reads time out."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read_byte(self) -> int | None:
        if self._pos >= len(self._data):
            return None
        byte = self._data[self._pos]
        self._pos += 1
        return byte


def decode_keys(data: bytes) -> list[int]:
    """Decode every key in *data*. A trailing partial escape is a bare escape."""
    source = _ByteSource(data)
    decoder = KeyDecoder(source.read_byte)
    keys: list[int] = []
    while source.remaining:
        keys.append(decoder.read_key())
    return keys
