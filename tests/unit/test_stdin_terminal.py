"""Tests for the stdin terminal provider, driven through a pipe."""

from __future__ import annotations

import os
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from termevents.errors import PollFailure, ReadFailure
from termevents.terminal.base import RawEvent, RawEventKind, TerminalInput
from termevents.terminal.stdin import StdinTerminal, classify


@pytest.fixture
def pipe() -> Iterator[tuple[StdinTerminal, int]]:
    read_fd, write_fd = os.pipe()
    terminal = StdinTerminal(fd=read_fd)
    yield terminal, write_fd
    terminal.close()
    for fd in (read_fd, write_fd):
        try:
            os.close(fd)
        except OSError:
            pass


def test_satisfies_protocol(pipe):
    terminal, _ = pipe
    assert isinstance(terminal, TerminalInput)


def test_poll_times_out_without_input(pipe):
    terminal, _ = pipe
    assert terminal.poll(0.01) is False


def test_reads_single_byte_key(pipe):
    terminal, write_fd = pipe
    os.write(write_fd, b"a")
    assert terminal.poll(0.1) is True
    assert terminal.read() == RawEvent(RawEventKind.KEY, b"a")
    assert terminal.poll(0.01) is False


def test_reads_one_key_at_a_time(pipe):
    terminal, write_fd = pipe
    os.write(write_fd, b"ab")
    assert terminal.read().data == b"a"
    assert terminal.read().data == b"b"


def test_reads_escape_sequences_whole(pipe):
    terminal, write_fd = pipe
    os.write(write_fd, b"\x1b[A\x1b[15~\x1bOPx")
    assert terminal.read().data == b"\x1b[A"
    assert terminal.read().data == b"\x1b[15~"
    assert terminal.read().data == b"\x1bOP"
    assert terminal.read().data == b"x"


def test_lone_escape(pipe):
    terminal, write_fd = pipe
    os.write(write_fd, b"\x1b")
    assert terminal.read().data == b"\x1b"


def test_alt_combination(pipe):
    terminal, write_fd = pipe
    os.write(write_fd, b"\x1bx")
    assert terminal.read().data == b"\x1bx"


def test_utf8_character(pipe):
    terminal, write_fd = pipe
    os.write(write_fd, "é€".encode())
    assert terminal.read().data == "é".encode()
    assert terminal.read().data == "€".encode()


def test_mouse_report_is_not_a_key(pipe):
    terminal, write_fd = pipe
    os.write(write_fd, b"\x1b[M !!q")
    event = terminal.read()
    assert event.kind == RawEventKind.OTHER
    assert event.data == b"\x1b[M !!"
    assert terminal.read() == RawEvent(RawEventKind.KEY, b"q")


def test_end_of_input_is_a_read_failure(pipe):
    terminal, write_fd = pipe
    os.close(write_fd)
    assert terminal.poll(0.1) is True
    with pytest.raises(ReadFailure) as excinfo:
        terminal.read()
    assert not excinfo.value.transient


def test_os_errors_are_wrapped(pipe):
    terminal, _ = pipe
    with patch.object(terminal, "_ready", side_effect=InterruptedError()):
        with pytest.raises(PollFailure) as excinfo:
            terminal.poll(0.1)
    assert excinfo.value.transient
    assert isinstance(excinfo.value.__cause__, InterruptedError)

    with patch("termevents.terminal.stdin.os.read", side_effect=OSError(5, "EIO")):
        with pytest.raises(ReadFailure) as excinfo:
            terminal.read()
    assert not excinfo.value.transient


def test_close_is_idempotent(pipe):
    terminal, _ = pipe
    terminal.close()
    terminal.close()


def test_classify():
    assert classify(b"a") == RawEventKind.KEY
    assert classify(b"\x1b[A") == RawEventKind.KEY
    assert classify(b"\x1bOP") == RawEventKind.KEY
    assert classify(b"\x1b[<0;10;5M") == RawEventKind.OTHER
    assert classify(b"\x1b[I") == RawEventKind.OTHER
    assert classify(b"\x1b[200~") == RawEventKind.OTHER


def test_invalid_lead_byte_is_its_own_event(pipe):
    terminal, write_fd = pipe
    os.write(write_fd, b"\xffabc")
    assert terminal.read().data == b"\xff"
    assert [terminal.read().data for _ in range(3)] == [b"a", b"b", b"c"]


def test_overlong_lead_bytes_are_single_events(pipe):
    terminal, write_fd = pipe
    os.write(write_fd, b"\xc0\xc1\xf5x")
    assert [terminal.read().data for _ in range(4)] == [b"\xc0", b"\xc1", b"\xf5", b"x"]


def test_latin1_byte_does_not_swallow_next_key(pipe):
    terminal, write_fd = pipe
    # Latin-1 "é" followed by "q": 0xE9 looks like a 3-byte UTF-8 lead
    os.write(write_fd, b"\xe9q")
    assert terminal.read().data == b"\xe9"
    assert terminal.poll(0.01) is True
    assert terminal.read() == RawEvent(RawEventKind.KEY, b"q")
    assert terminal.poll(0.01) is False


def test_held_byte_can_start_an_escape_sequence(pipe):
    terminal, write_fd = pipe
    os.write(write_fd, b"\xc3\x1b[A")
    assert terminal.read().data == b"\xc3"
    assert terminal.read().data == b"\x1b[A"
