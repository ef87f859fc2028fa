"""Exception hierarchy for terminal polling, reading and event delivery."""

from __future__ import annotations


class EventError(Exception):
    """Base class for all termevents errors."""


class _ProviderFailure(EventError):
    def __init__(self, message: str, *, transient: bool = False) -> None:
        super().__init__(message)
        self.transient = transient


class PollFailure(_ProviderFailure):
    """The terminal readiness check failed."""


class ReadFailure(_ProviderFailure):
    """Reading a ready terminal event failed (includes end of input)."""


class SendFailure(EventError):
    """The channel has no living receiver, or the sender was already closed."""


class ChannelClosed(EventError):
    """No producer remains and every queued event has been consumed."""


def is_transient_os_error(exc: OSError) -> bool:
    """Whether an OS-level error is worth retrying (EINTR / EAGAIN class)."""
    return isinstance(exc, (InterruptedError, BlockingIOError))
