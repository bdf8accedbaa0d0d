"""Tests for pi.kilo.session -- key handling, prompt, save and quit flows."""

from __future__ import annotations

import pytest

from pi.kilo.buffer import Buffer
from pi.kilo.keys import Key, decode_keys
from pi.kilo.session import HELP_MESSAGE, EditSession, SessionExit
from pi.kilo.settings import EditorSettings

from .virtual_terminal import VirtualTerminal


def make_session(
    *lines: bytes,
    filename: str | None = None,
    keys: bytes = b"",
    settings: EditorSettings | None = None,
) -> tuple[EditSession, VirtualTerminal]:
    term = VirtualTerminal(rows=24, columns=80, keys=keys)
    buf = Buffer.from_lines(list(lines), filename=filename)
    return EditSession(term, buf, settings), term


def press(session: EditSession, data: bytes) -> None:
    for key in decode_keys(data):
        session.process_keypress(key)


def message(session: EditSession) -> str:
    return session.compositor.message.text


class TestSetup:
    def test_screen_excludes_status_and_message_lines(self):
        session, _ = make_session()
        assert session.viewport.screen_rows == 22
        assert session.viewport.screen_cols == 80

    def test_help_message_shown_first(self):
        session, _ = make_session()
        assert message(session) == HELP_MESSAGE

    def test_default_buffer_uses_configured_tab_stop(self):
        term = VirtualTerminal()
        session = EditSession(term, settings=EditorSettings(tab_stop=4))
        press(session, b"\tx")
        assert session.buffer.rows[0].render == b"    x"


class TestEditing:
    def test_type_enter_type(self):
        session, _ = make_session()
        press(session, b"hi\rx")
        assert session.buffer.lines() == [b"hi", b"x"]
        assert (session.viewport.cx, session.viewport.cy) == (1, 1)

    def test_enter_mid_line(self):
        session, _ = make_session(b"hello")
        session.viewport.set_position(2, 0)
        press(session, b"\r")
        assert session.buffer.lines() == [b"he", b"llo"]
        assert (session.viewport.cx, session.viewport.cy) == (0, 1)

    def test_backspace_joins_lines(self):
        session, _ = make_session(b"foo", b"bar")
        session.viewport.set_position(0, 1)
        session.process_keypress(Key.BACKSPACE)
        assert session.buffer.lines() == [b"foobar"]
        assert (session.viewport.cx, session.viewport.cy) == (3, 0)

    def test_ctrl_h_is_backspace(self):
        session, _ = make_session(b"abc")
        session.viewport.set_position(3, 0)
        session.process_keypress(Key.CTRL_H)
        assert session.buffer.lines() == [b"ab"]

    def test_delete_forward(self):
        session, _ = make_session(b"abc")
        session.viewport.set_position(1, 0)
        press(session, b"\x1b[3~")
        assert session.buffer.lines() == [b"ac"]
        assert session.viewport.cx == 1

    def test_delete_forward_at_line_end_joins_next_line(self):
        session, _ = make_session(b"ab", b"cd")
        session.viewport.set_position(2, 0)
        session.process_keypress(Key.DEL)
        assert session.buffer.lines() == [b"abcd"]
        assert (session.viewport.cx, session.viewport.cy) == (2, 0)

    def test_tab_is_inserted(self):
        session, _ = make_session()
        press(session, b"\tx")
        assert session.buffer.lines() == [b"\tx"]

    def test_navigation_keys(self):
        session, _ = make_session(b"hello", b"world")
        press(session, b"\x1b[F")
        assert session.viewport.cx == 5
        press(session, b"\x1b[H")
        assert session.viewport.cx == 0
        press(session, b"\x1b[B\x1b[C")
        assert (session.viewport.cx, session.viewport.cy) == (1, 1)
        press(session, b"\x1b[6~")
        assert session.viewport.cy == 2
        press(session, b"\x1b[5~")
        assert session.viewport.cy == 0

    def test_ignored_keys(self):
        session, _ = make_session(b"abc")
        session.process_keypress(Key.CTRL_L)
        session.process_keypress(Key.ESCAPE)
        assert session.buffer.lines() == [b"abc"]
        assert session.buffer.is_dirty is False


class TestQuit:
    def test_clean_buffer_quits_immediately(self):
        session, _ = make_session(b"abc")
        with pytest.raises(SessionExit) as exc:
            session.process_keypress(Key.CTRL_Q)
        assert exc.value.code == 0

    def test_dirty_buffer_needs_three_presses(self):
        session, _ = make_session()
        press(session, b"x")
        session.process_keypress(Key.CTRL_Q)
        assert "2 more times" in message(session)
        session.process_keypress(Key.CTRL_Q)
        assert "1 more times" in message(session)
        with pytest.raises(SessionExit):
            session.process_keypress(Key.CTRL_Q)

    def test_other_key_resets_counter(self):
        session, _ = make_session()
        press(session, b"x")
        session.process_keypress(Key.CTRL_Q)
        session.process_keypress(Key.CTRL_Q)
        session.process_keypress(Key.ARROW_LEFT)
        session.process_keypress(Key.CTRL_Q)
        assert "2 more times" in message(session)

    def test_configured_quit_times(self):
        session, _ = make_session(settings=EditorSettings(quit_times=2))
        press(session, b"x")
        session.process_keypress(Key.CTRL_Q)
        assert "1 more times" in message(session)
        with pytest.raises(SessionExit):
            session.process_keypress(Key.CTRL_Q)


class TestRun:
    def test_run_until_quit(self):
        session, term = make_session(keys=b"hi\x11\x11\x11")
        assert session.run() == 0
        assert session.buffer.lines() == [b"hi"]
        assert term.last_frame == b"\x1b[2J\x1b[H"
        # one frame per key read
        assert len(term.writes) == 6

    def test_timeouts_do_not_produce_keys(self):
        session, term = make_session(b"abc")
        term.feed_timeout()
        term.feed_timeout()
        term.feed(b"\x11")
        assert session.run() == 0
        assert len(term.writes) == 2


class TestPrompt:
    def test_prompt_returns_typed_text(self):
        session, _ = make_session(keys=b"name\r")
        assert session.prompt("Name: {}") == "name"
        assert message(session) == ""

    def test_prompt_backspace(self):
        session, _ = make_session(keys=b"ab\x7fc\r")
        assert session.prompt("Name: {}") == "ac"

    def test_prompt_ignores_empty_enter(self):
        session, _ = make_session(keys=b"\rz\r")
        assert session.prompt("Name: {}") == "z"

    def test_prompt_escape_cancels(self):
        session, term = make_session(keys=b"ab\x1b")
        term.feed_timeout()
        assert session.prompt("Name: {}") is None

    def test_prompt_shows_partial_input(self):
        session, term = make_session(keys=b"ab\r")
        session.prompt("Name: {}")
        assert b"Name: ab" in term.writes[2]
        assert len(term.writes) == 3

    def test_prompt_callback(self):
        seen: list[tuple[str, int]] = []
        session, _ = make_session(keys=b"a\r")
        session.prompt("> {}", on_key=lambda text, key: seen.append((text, key)))
        assert seen == [("a", ord("a")), ("a", Key.ENTER)]

    def test_prompt_drops_control_bytes(self):
        session, _ = make_session(keys=b"a\x01b\r")
        assert session.prompt("> {}") == "ab"


class TestSave:
    def test_save_named_buffer(self, tmp_path):
        path = tmp_path / "doc.txt"
        session, _ = make_session(b"one", filename=str(path))
        press(session, b"!")
        session.process_keypress(Key.CTRL_S)
        assert path.read_bytes() == b"!one\n"
        assert message(session) == "5 bytes written to disk"
        assert session.buffer.is_dirty is False

    def test_save_as_prompt(self, tmp_path):
        path = tmp_path / "new.txt"
        session, _ = make_session(keys=str(path).encode() + b"\r")
        press(session, b"hi")
        session.process_keypress(Key.CTRL_S)
        assert path.read_bytes() == b"hi\n"
        assert session.buffer.filename == str(path)

    def test_save_as_cancelled(self):
        session, term = make_session(keys=b"\x1b")
        term.feed_timeout()
        press(session, b"hi")
        session.process_keypress(Key.CTRL_S)
        assert message(session) == "Save aborted"
        assert session.buffer.filename is None
        assert session.buffer.is_dirty

    def test_save_failure_keeps_session_running(self, tmp_path):
        bad = tmp_path / "missing" / "doc.txt"
        session, _ = make_session(b"abc", filename=str(bad))
        press(session, b"x")
        session.process_keypress(Key.CTRL_S)
        assert message(session).startswith("Can't save! I/O error: ")
        assert session.buffer.lines() == [b"xabc"]
        assert session.buffer.is_dirty
        press(session, b"y")
        assert session.buffer.lines() == [b"xyabc"]
