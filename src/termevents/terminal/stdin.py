"""Terminal input provider reading stdin via termios cbreak mode."""

from __future__ import annotations

import logging
import os
import selectors
import sys
import termios
import tty
from types import TracebackType

from termevents.errors import PollFailure, ReadFailure, is_transient_os_error
from termevents.terminal.base import RawEvent, RawEventKind

logger = logging.getLogger(__name__)

# How long to wait for the rest of a multi-byte sequence
_SEQUENCE_TIMEOUT = 0.02
_MAX_SEQUENCE_LEN = 16

# Sequences (after ESC) that are not key presses
_NON_KEY_PREFIXES = (
    b"[M",  # X10 mouse report
    b"[<",  # SGR mouse report
    b"[I",  # focus in
    b"[O",  # focus out
    b"[200~",  # bracketed paste start
    b"[201~",  # bracketed paste end
)


def classify(data: bytes) -> RawEventKind:
    """Tell key presses apart from other terminal reports."""
    if data.startswith(b"\x1b"):
        tail = data[1:]
        if any(tail.startswith(prefix) for prefix in _NON_KEY_PREFIXES):
            return RawEventKind.OTHER
    return RawEventKind.KEY


class StdinTerminal:
    """Reads one terminal event at a time from a file descriptor.

    Uses ``os.read`` on the raw descriptor so that reads stay in sync with
    what ``selectors`` reports as available. Python's buffered
    ``sys.stdin.read`` can consume multiple bytes into its internal buffer,
    causing the selector to miss subsequent bytes of an escape sequence.

    Entering the context manager puts the descriptor into cbreak mode and
    restores the previous settings on exit::

        with StdinTerminal() as terminal:
            if terminal.poll(0.25):
                event = terminal.read()
    """

    def __init__(self, fd: int | None = None) -> None:
        self._fd: int = sys.stdin.fileno() if fd is None else fd
        self._old_settings: list | None = None
        # A byte read while completing a sequence that starts the next event
        self._held = b""
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._fd, selectors.EVENT_READ)

    def __enter__(self) -> StdinTerminal:
        self._old_settings = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._old_settings is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._old_settings)
            self._old_settings = None
        self.close()

    def close(self) -> None:
        if self._selector.get_map() is None:
            return
        self._selector.unregister(self._fd)
        self._selector.close()

    def poll(self, timeout: float) -> bool:
        try:
            return self._ready(timeout)
        except OSError as exc:
            raise PollFailure(
                f"polling fd {self._fd} failed: {exc}",
                transient=is_transient_os_error(exc),
            ) from exc

    def read(self) -> RawEvent:
        try:
            data = self._read_event_bytes()
        except OSError as exc:
            raise ReadFailure(
                f"reading fd {self._fd} failed: {exc}",
                transient=is_transient_os_error(exc),
            ) from exc
        if not data:
            raise ReadFailure(f"end of input on fd {self._fd}")
        return RawEvent(classify(data), data)

    def _ready(self, timeout: float) -> bool:
        if self._held:
            return True
        return bool(self._selector.select(timeout=timeout))

    def _read_byte(self) -> bytes:
        if self._held:
            byte, self._held = self._held, b""
            return byte
        return os.read(self._fd, 1)

    def _read_event_bytes(self) -> bytes:
        first = self._read_byte()
        if first == b"\x1b":
            return first + self._read_escape_tail()
        if first and 0xC2 <= first[0] <= 0xF4:
            return first + self._read_utf8_tail(first[0])
        return first

    def _read_escape_tail(self) -> bytes:
        """Read the rest of an escape sequence, or nothing for a lone ESC."""
        if not self._ready(_SEQUENCE_TIMEOUT):
            return b""
        intro = self._read_byte()
        if intro not in (b"[", b"O"):
            return intro

        tail = intro
        while len(tail) < _MAX_SEQUENCE_LEN and self._ready(_SEQUENCE_TIMEOUT):
            byte = self._read_byte()
            if not byte:
                break
            tail += byte
            # CSI/SS3 sequences end on a byte in 0x40-0x7e
            if len(tail) > 1 and 0x40 <= byte[0] <= 0x7E:
                break

        if tail == b"[M":
            # X10 mouse reports carry three raw payload bytes
            for _ in range(3):
                if not self._ready(_SEQUENCE_TIMEOUT):
                    break
                tail += self._read_byte()
        return tail

    def _read_utf8_tail(self, lead: int) -> bytes:
        """Read continuation bytes; a non-continuation byte is held back."""
        if lead >= 0xF0:
            remaining = 3
        elif lead >= 0xE0:
            remaining = 2
        else:
            remaining = 1
        tail = b""
        for _ in range(remaining):
            if not self._ready(_SEQUENCE_TIMEOUT):
                logger.debug("Truncated UTF-8 sequence on fd %d", self._fd)
                break
            byte = self._read_byte()
            if not byte:
                break
            if not 0x80 <= byte[0] <= 0xBF:
                self._held = byte
                break
            tail += byte
        return tail
