"""Event source, the handle the application reads keys from."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from types import TracebackType
from typing import TYPE_CHECKING

from termevents.channel import open_channel
from termevents.config import EventConfig
from termevents.errors import ChannelClosed
from termevents.keys import Key
from termevents.pump import InputPump
from termevents.terminal.base import TerminalInput

if TYPE_CHECKING:
    from termevents.terminal.stdin import StdinTerminal

logger = logging.getLogger(__name__)


class EventSource:
    """Merged stream of key presses and heartbeat ticks.

    Threading model:
    - Caller thread: blocks in next() (single reader)
    - Daemon thread: InputPump polling ``terminal``

    The source keeps its own sender open for as long as the pump runs, so
    the stream only ends after close() or a pump failure.
    """

    def __init__(
        self,
        config: EventConfig | None = None,
        terminal: TerminalInput | None = None,
    ) -> None:
        self._config = config if config is not None else EventConfig()
        self._stdin: StdinTerminal | None = None
        if terminal is None:
            from termevents.terminal.stdin import StdinTerminal

            terminal = self._stdin = StdinTerminal()
        self._terminal = terminal
        self._closed = False

        self._tx, self._rx = open_channel()
        self._pump = InputPump(
            terminal,
            self._tx.clone(),
            self._config,
            on_exit=self._tx.close,
        )
        self._pump.start()

    @classmethod
    def new(
        cls, tick_rate_ms: int, terminal: TerminalInput | None = None
    ) -> EventSource:
        """Start a source ticking every ``tick_rate_ms`` milliseconds."""
        return cls(EventConfig.from_millis(tick_rate_ms), terminal)

    @classmethod
    def with_config(
        cls, config: EventConfig, terminal: TerminalInput | None = None
    ) -> EventSource:
        return cls(config, terminal)

    @property
    def config(self) -> EventConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_running(self) -> bool:
        return self._pump.is_running

    @property
    def failure(self) -> BaseException | None:
        """The error that stopped the input pump, if it failed."""
        return self._pump.failure

    def next(self) -> Key:
        """Block until the next key or heartbeat.

        Raises ChannelClosed once the pump has stopped and every queued
        event has been returned. If the pump failed, its error is the
        ``__cause__``.
        """
        try:
            return self._rx.recv()
        except ChannelClosed:
            failure = self._pump.failure
            if failure is not None:
                raise ChannelClosed(f"input pump stopped: {failure}") from failure
            raise

    def __iter__(self) -> Iterator[Key]:
        while True:
            try:
                yield self.next()
            except ChannelClosed:
                if self._pump.failure is not None:
                    raise
                return

    def close(self) -> None:
        """Stop and join the pump, then release both channel ends.

        A stdin provider created by this source is closed too; one passed in
        by the caller stays open.
        """
        if self._closed:
            return
        self._closed = True
        self._pump.stop()
        timeout = self._config.tick_rate + self._config.join_timeout
        if self._pump.join(timeout):
            if self._stdin is not None:
                self._stdin.close()
        else:
            logger.warning("Input pump did not stop within %.2fs", timeout)
        self._tx.close()
        self._rx.close()
        logger.debug("Event source closed")

    def __enter__(self) -> EventSource:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
