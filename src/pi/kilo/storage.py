"""Whole-file load and store."""

from __future__ import annotations

import logging
import os
import re

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(rb"\r\n|\n|\r")


def split_lines(data: bytes) -> list[bytes]:
    """Split *data* into lines on ``\\r\\n``, ``\\n`` or ``\\r``.

    Terminators are dropped. A terminator at the very end does not start an
    extra empty line, and empty input has no lines at all.
    """
    if not data:
        return []
    lines = _LINE_BREAK_RE.split(data)
    if lines[-1] == b"":
        lines.pop()
    return lines


def load_rows(path: str) -> list[bytes]:
    """Read *path* and return its lines. ``OSError`` propagates."""
    with open(path, "rb") as f:
        data = f.read()
    lines = split_lines(data)
    logger.debug("loaded %s: %d bytes, %d lines", path, len(data), len(lines))
    return lines


def save_bytes(path: str, data: bytes) -> int:
    """Write *data* to *path*, truncating any existing file to its length.

    Returns the number of bytes written. ``OSError`` propagates to the caller,
    which decides how to report it.
    """
    fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        os.ftruncate(fd, len(data))
        view = memoryview(data)
        written = 0
        while written < len(data):
            written += os.write(fd, view[written:])
    finally:
        os.close(fd)
    logger.debug("saved %s: %d bytes", path, written)
    return written
