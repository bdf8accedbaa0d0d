"""Exception hierarchy for the editor.

Two tiers: ``FatalError`` subclasses end the session (the CLI restores the
terminal and exits non-zero); everything else is reported on the message
line and the session keeps running.
"""

from __future__ import annotations


class KiloError(Exception):
    """Base class for editor errors."""


class FatalError(KiloError):
    """The process cannot continue safely."""


class TerminalError(FatalError):
    """The terminal could not be queried or switched into raw mode."""


class InputError(FatalError):
    """Reading from the input stream failed for a reason other than a timeout."""
