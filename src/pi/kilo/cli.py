"""Command-line entry point for the kilo editor."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Sequence

from pi.kilo import __version__
from pi.kilo.buffer import Buffer
from pi.kilo.errors import FatalError
from pi.kilo.session import EditSession
from pi.kilo.settings import SettingsManager
from pi.kilo.storage import load_rows
from pi.kilo.terminal import CLEAR_SCREEN, ProcessTerminal

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kilo",
        description="A small terminal text editor",
    )
    parser.add_argument("file", nargs="?", help="File to open")
    parser.add_argument("--tab-stop", type=int, help="Columns per tab stop (default: 8)")
    parser.add_argument(
        "--log-file",
        default=os.environ.get("KILO_LOG_FILE"),
        help="Write a debug log to this file (or set KILO_LOG_FILE)",
    )
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def _configure_logging(args: argparse.Namespace) -> None:
    # stdout is the editor screen; only ever log to a file
    if not args.log_file:
        return
    logging.basicConfig(
        filename=args.log_file,
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args)

    manager = SettingsManager.create(os.getcwd())
    manager.apply_overrides({"tabStop": args.tab_stop})
    settings = manager.editor_settings()

    terminal = ProcessTerminal(read_timeout=settings.read_timeout)
    try:
        terminal.start()
        if args.file:
            lines = load_rows(args.file)
            buffer = Buffer.from_lines(lines, filename=args.file, tab_stop=settings.tab_stop)
        else:
            buffer = Buffer(tab_stop=settings.tab_stop)
        session = EditSession(terminal, buffer, settings)
        return session.run()
    except (FatalError, OSError) as e:
        logger.error("fatal: %s", e)
        try:
            terminal.write(CLEAR_SCREEN)
        except OSError:
            pass
        terminal.stop()
        print(f"kilo: {e}", file=sys.stderr)
        return 1
    finally:
        terminal.stop()


if __name__ == "__main__":
    sys.exit(main())
