"""pi-kilo: a small terminal text editor with flicker-free redraws."""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from pi.kilo.buffer import Buffer  # noqa: E402
from pi.kilo.compositor import Compositor, StatusMessage  # noqa: E402
from pi.kilo.errors import FatalError, InputError, KiloError, TerminalError  # noqa: E402
from pi.kilo.keys import Key, KeyDecoder, ctrl_key, decode_keys, key_name  # noqa: E402
from pi.kilo.row import TAB_STOP, Row, compute_render, cx_to_rx, rx_to_cx  # noqa: E402
from pi.kilo.session import EditSession, SessionExit  # noqa: E402
from pi.kilo.settings import EditorSettings, SettingsManager  # noqa: E402
from pi.kilo.terminal import ProcessTerminal, Terminal  # noqa: E402
from pi.kilo.viewport import Viewport  # noqa: E402

__all__ = [
    # Buffer model
    "Buffer",
    "Row",
    "TAB_STOP",
    "compute_render",
    "cx_to_rx",
    "rx_to_cx",
    # Keys
    "Key",
    "KeyDecoder",
    "ctrl_key",
    "decode_keys",
    "key_name",
    # Screen
    "Compositor",
    "StatusMessage",
    "Viewport",
    # Session
    "EditSession",
    "SessionExit",
    # Settings
    "EditorSettings",
    "SettingsManager",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Errors
    "FatalError",
    "InputError",
    "KiloError",
    "TerminalError",
]
