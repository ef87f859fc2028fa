"""Input pump — background thread merging key presses with heartbeats."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from termevents.channel import Sender
from termevents.config import EventConfig
from termevents.errors import PollFailure, ReadFailure, SendFailure
from termevents.keys import Key, decode_key
from termevents.terminal.base import RawEventKind, TerminalInput

logger = logging.getLogger(__name__)


class InputPump:
    """Polls a terminal and forwards decoded keys plus ``Key.NONE`` ticks.

    Every loop iteration waits at most ``config.tick_rate`` for input. A key
    press is sent followed immediately by a heartbeat; an idle iteration
    sends only the heartbeat. The pump owns ``sender`` and closes it when
    the loop ends, for whatever reason.

    Transient provider failures are retried with exponential backoff; any
    other failure stops the pump and is kept in ``failure``.
    """

    def __init__(
        self,
        terminal: TerminalInput,
        sender: Sender,
        config: EventConfig,
        decode: Callable[[bytes], Key] = decode_key,
        on_exit: Callable[[], None] | None = None,
    ) -> None:
        self._terminal = terminal
        self._sender = sender
        self._config = config
        self._decode = decode
        self._on_exit = on_exit
        self._stop_event = threading.Event()
        self._failure: BaseException | None = None
        self._thread = threading.Thread(
            target=self._run, name="input-pump", daemon=True
        )

    @property
    def failure(self) -> BaseException | None:
        """The error that stopped the pump, or None."""
        return self._failure

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        """Signal the loop to exit after the current poll."""
        self._stop_event.set()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the thread to finish. Returns True if it did."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self) -> None:
        logger.debug("Input pump started (tick rate %.3fs)", self._config.tick_rate)
        try:
            self._loop()
        except SendFailure as exc:
            if self._stop_event.is_set():
                logger.debug("Receiver closed during shutdown: %s", exc)
            else:
                self._failure = exc
                logger.error("Input pump stopped: %s", exc)
        except (PollFailure, ReadFailure) as exc:
            self._failure = exc
            logger.error("Input pump stopped: %s", exc)
        except Exception as exc:
            self._failure = exc
            logger.exception("Input pump crashed")
        finally:
            self._sender.close()
            if self._on_exit is not None:
                self._on_exit()
            logger.debug("Input pump exited")

    def _loop(self) -> None:
        attempts = 0
        while not self._stop_event.is_set():
            try:
                key = self._next_key()
            except (PollFailure, ReadFailure) as exc:
                if not exc.transient or attempts >= self._config.max_retries:
                    raise
                attempts += 1
                delay = self._config.backoff(attempts)
                logger.warning(
                    "Transient terminal failure (attempt %d/%d), retrying in %.3fs: %s",
                    attempts,
                    self._config.max_retries,
                    delay,
                    exc,
                )
                self._stop_event.wait(delay)
                continue

            attempts = 0
            if key is not None:
                self._sender.send(key)
            self._sender.send(Key.NONE)

    def _next_key(self) -> Key | None:
        """Wait one tick for input; return the decoded key, if any."""
        if not self._terminal.poll(self._config.tick_rate):
            return None
        event = self._terminal.read()
        if event.kind is not RawEventKind.KEY:
            logger.debug("Ignoring %s terminal event", event.kind.value)
            return None
        return self._decode(event.data)
