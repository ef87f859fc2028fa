"""TerminalInput protocol that every terminal input provider satisfies."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class RawEventKind(enum.Enum):
    """Tag of a raw terminal event."""

    KEY = "key"
    OTHER = "other"


@dataclass(frozen=True)
class RawEvent:
    """One undecoded terminal event."""

    kind: RawEventKind
    data: bytes = b""


@runtime_checkable
class TerminalInput(Protocol):
    """Protocol for terminal input providers.

    Implementations raise ``PollFailure`` / ``ReadFailure`` on I/O errors.
    """

    def poll(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds; return True if an event is ready."""
        ...

    def read(self) -> RawEvent:
        """Consume and return exactly one ready event."""
        ...
