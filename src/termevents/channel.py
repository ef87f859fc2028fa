"""Unbounded multi-producer / single-consumer channel of keys.

The receiver only observes closure once every sender has been closed and
the queue is drained; until then ``recv()`` blocks for the next item.
"""

from __future__ import annotations

import threading
from collections import deque

from termevents.errors import ChannelClosed, SendFailure
from termevents.keys import Key


class _ChannelState:
    """State shared by every handle on one channel, guarded by ``cond``."""

    def __init__(self) -> None:
        self.items: deque[Key] = deque()
        self.cond = threading.Condition()
        self.senders = 0
        self.receiver_open = True


class Sender:
    """Producer handle. Safe to use from any thread."""

    def __init__(self, state: _ChannelState) -> None:
        self._state = state
        self._closed = False
        with state.cond:
            state.senders += 1

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, key: Key) -> None:
        state = self._state
        with state.cond:
            if self._closed:
                raise SendFailure("sender is closed")
            if not state.receiver_open:
                raise SendFailure("receiver is closed")
            state.items.append(key)
            state.cond.notify()

    def clone(self) -> Sender:
        """Return a new producer handle that keeps the channel open."""
        if self._closed:
            raise SendFailure("cannot clone a closed sender")
        return Sender(self._state)

    def close(self) -> None:
        """Release this handle. Idempotent."""
        state = self._state
        with state.cond:
            if self._closed:
                return
            self._closed = True
            state.senders -= 1
            if state.senders == 0:
                state.cond.notify_all()


class Receiver:
    """Consumer handle. Only one thread may receive at a time."""

    def __init__(self, state: _ChannelState) -> None:
        self._state = state

    @property
    def pending(self) -> int:
        with self._state.cond:
            return len(self._state.items)

    def recv(self, timeout: float | None = None) -> Key:
        """Block until a key is available.

        Raises ``ChannelClosed`` once no sender remains and the queue is
        empty, and ``TimeoutError`` if ``timeout`` elapses first.
        """
        state = self._state
        with state.cond:
            if not state.receiver_open:
                raise ChannelClosed("receiver is closed")
            ready = state.cond.wait_for(
                lambda: state.items or state.senders == 0 or not state.receiver_open,
                timeout=timeout,
            )
            if state.items:
                return state.items.popleft()
            if not ready:
                raise TimeoutError(f"no event within {timeout}s")
            raise ChannelClosed("all senders are closed")

    def close(self) -> None:
        """Drop queued items; later sends fail with ``SendFailure``."""
        state = self._state
        with state.cond:
            state.receiver_open = False
            state.items.clear()
            state.cond.notify_all()


def open_channel() -> tuple[Sender, Receiver]:
    """Create a channel and return its first sender and its receiver."""
    state = _ChannelState()
    return Sender(state), Receiver(state)
