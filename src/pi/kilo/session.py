"""Interactive editing session: the read-key / edit / redraw loop."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from pi.kilo.buffer import Buffer
from pi.kilo.compositor import Compositor
from pi.kilo.keys import ARROW_KEYS, Key, KeyDecoder, key_name
from pi.kilo.settings import EditorSettings
from pi.kilo.storage import save_bytes
from pi.kilo.terminal import CLEAR_SCREEN, Terminal
from pi.kilo.viewport import Viewport

logger = logging.getLogger(__name__)

HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit"
SAVE_AS_PROMPT = "Save as: {} (ESC to cancel)"

# Rows below the text area: status line and message line
RESERVED_ROWS = 2

PromptCallback = Callable[[str, int], None]


class SessionExit(Exception):
    """Raised by ``process_keypress`` when the user quits."""

    def __init__(self, code: int = 0) -> None:
        super().__init__(code)
        self.code = code


class EditSession:
    """Owns the buffer, cursor and screen state for one editor run."""

    def __init__(
        self,
        terminal: Terminal,
        buffer: Buffer | None = None,
        settings: EditorSettings | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.terminal = terminal
        self.settings = settings or EditorSettings()
        self.buffer = buffer if buffer is not None else Buffer(tab_stop=self.settings.tab_stop)

        self.viewport = Viewport(
            self.buffer,
            max(terminal.rows - RESERVED_ROWS, 1),
            max(terminal.columns, 1),
        )
        self.compositor = Compositor(
            terminal,
            self.buffer,
            self.viewport,
            message_timeout=self.settings.message_timeout,
            clock=clock,
        )
        self.decoder = KeyDecoder(terminal.read_byte)
        self.quit_times = self.settings.quit_times

        self.set_status_message(HELP_MESSAGE)

    # -- collaborators ------------------------------------------------------

    def set_status_message(self, text: str) -> None:
        self.compositor.set_status_message(text)

    def refresh(self) -> None:
        self.compositor.refresh()

    def read_key(self) -> int:
        key = self.decoder.read_key()
        logger.debug("key %s", key_name(key))
        return key

    # -- main loop ----------------------------------------------------------

    def run(self) -> int:
        """Edit until the user quits; returns the exit code."""
        try:
            while True:
                self.refresh()
                self.process_keypress(self.read_key())
        except SessionExit as e:
            self.terminal.write(CLEAR_SCREEN)
            return e.code

    def process_keypress(self, key: int) -> None:
        vp = self.viewport

        if key == Key.CTRL_Q:
            if self.buffer.is_dirty:
                self.quit_times -= 1
                if self.quit_times > 0:
                    self.set_status_message(
                        "WARNING!!! File has unsaved changes. "
                        f"Press Ctrl-Q {self.quit_times} more times to quit."
                    )
                    return
            raise SessionExit(0)

        if key == Key.ENTER:
            vp.set_position(*self.buffer.insert_newline(vp.cy, vp.cx))
        elif key == Key.CTRL_S:
            self.save()
        elif key == Key.HOME:
            vp.move_home()
        elif key == Key.END:
            vp.move_end()
        elif key in (Key.BACKSPACE, Key.CTRL_H, Key.DEL):
            if key == Key.DEL:
                vp.move_cursor(Key.ARROW_RIGHT)
            vp.set_position(*self.buffer.delete_char_at(vp.cy, vp.cx))
        elif key in (Key.PAGE_UP, Key.PAGE_DOWN):
            vp.page(key)
        elif key in ARROW_KEYS:
            vp.move_cursor(key)
        elif key in (Key.CTRL_L, Key.ESCAPE):
            pass
        elif key < 256:
            vp.set_position(*self.buffer.insert_char_at(vp.cy, vp.cx, key))

        self.quit_times = self.settings.quit_times

    # -- prompt -------------------------------------------------------------

    def prompt(self, template: str, on_key: Optional[PromptCallback] = None) -> str | None:
        """Read a line of input on the message line.

        *template* is formatted with the text typed so far. Returns the text
        on Enter (empty input is not accepted) or ``None`` on Escape.
        *on_key* is called with the current text and the key after each
        keystroke.
        """
        typed = bytearray()

        while True:
            self.set_status_message(template.format(typed.decode("ascii")))
            self.refresh()

            key = self.read_key()
            if key in (Key.DEL, Key.CTRL_H, Key.BACKSPACE):
                if typed:
                    del typed[-1]
            elif key == Key.ESCAPE:
                self.set_status_message("")
                if on_key:
                    on_key(typed.decode("ascii"), key)
                return None
            elif key == Key.ENTER:
                if typed:
                    self.set_status_message("")
                    if on_key:
                        on_key(typed.decode("ascii"), key)
                    return typed.decode("ascii")
            elif 0x20 <= key < 0x7F:
                typed.append(key)

            if on_key:
                on_key(typed.decode("ascii"), key)

    # -- save ---------------------------------------------------------------

    def save(self) -> None:
        if self.buffer.filename is None:
            name = self.prompt(SAVE_AS_PROMPT)
            if name is None:
                self.set_status_message("Save aborted")
                return
            self.buffer.filename = name

        data = self.buffer.serialize()
        try:
            written = save_bytes(self.buffer.filename, data)
        except OSError as e:
            logger.warning("save to %s failed: %s", self.buffer.filename, e)
            self.set_status_message(f"Can't save! I/O error: {e.strerror or e}")
            return

        self.buffer.mark_clean()
        self.set_status_message(f"{written} bytes written to disk")
