"""Shared test fixtures."""

from __future__ import annotations

import queue
from collections.abc import Iterator

import pytest

from termevents.config import EventConfig
from termevents.errors import PollFailure
from termevents.source import EventSource
from termevents.terminal.base import RawEvent, RawEventKind


class FakeTerminal:
    """Terminal input fed from a queue.

    Each injected item is either a RawEvent or an exception. poll() waits
    up to its timeout for the next item: a PollFailure is raised straight
    away, anything else is held for read(), which returns it (or raises it
    if it is an exception).
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[RawEvent | Exception] = queue.Queue()
        self._pending: RawEvent | Exception | None = None
        self.polls = 0
        self.reads = 0
        self.closed = False

    def inject(self, item: RawEvent | Exception) -> None:
        self._queue.put(item)

    def inject_key(self, data: bytes) -> None:
        self.inject(RawEvent(RawEventKind.KEY, data))

    def close(self) -> None:
        self.closed = True

    def poll(self, timeout: float) -> bool:
        self.polls += 1
        if self._pending is not None:
            return True
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return False
        if isinstance(item, PollFailure):
            raise item
        self._pending = item
        return True

    def read(self) -> RawEvent:
        self.reads += 1
        item, self._pending = self._pending, None
        assert item is not None, "read() without a ready event"
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def terminal() -> FakeTerminal:
    return FakeTerminal()


@pytest.fixture
def fast_config() -> EventConfig:
    return EventConfig(tick_rate=0.02, retry_backoff=0.001, join_timeout=2.0)


@pytest.fixture
def source(terminal: FakeTerminal, fast_config: EventConfig) -> Iterator[EventSource]:
    events = EventSource.with_config(fast_config, terminal=terminal)
    yield events
    events.close()


@pytest.fixture
def terminal_factory() -> type[FakeTerminal]:
    return FakeTerminal
