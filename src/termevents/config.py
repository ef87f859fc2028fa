"""Event stream configuration: tick rate, retry policy, env overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class EventConfig:
    """Configuration for the input pump.

    ``tick_rate`` is the longest the pump waits for input before emitting a
    heartbeat, in seconds.
    """

    tick_rate: float = 0.25
    max_retries: int = 3
    retry_backoff: float = 0.01
    max_backoff: float = 0.5
    join_timeout: float = 1.0

    def __post_init__(self) -> None:
        if self.tick_rate < 0:
            raise ValueError(f"tick_rate must be >= 0, got {self.tick_rate}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.retry_backoff < 0:
            raise ValueError(f"retry_backoff must be >= 0, got {self.retry_backoff}")
        if self.max_backoff < 0:
            raise ValueError(f"max_backoff must be >= 0, got {self.max_backoff}")
        if self.join_timeout < 0:
            raise ValueError(f"join_timeout must be >= 0, got {self.join_timeout}")

    @classmethod
    def from_millis(cls, tick_rate_ms: int) -> EventConfig:
        return cls(tick_rate=tick_rate_ms / 1000)

    @classmethod
    def load(cls) -> EventConfig:
        """Load config from environment variables, falling back to defaults."""
        overrides: dict[str, float | int] = {}

        env_tick = os.environ.get("TERMEVENTS_TICK_RATE_MS")
        if env_tick:
            overrides["tick_rate"] = float(env_tick) / 1000

        env_retries = os.environ.get("TERMEVENTS_MAX_RETRIES")
        if env_retries:
            overrides["max_retries"] = int(env_retries)

        env_backoff = os.environ.get("TERMEVENTS_RETRY_BACKOFF_MS")
        if env_backoff:
            overrides["retry_backoff"] = float(env_backoff) / 1000

        return cls(**overrides)  # type: ignore[arg-type]

    def backoff(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (1-based)."""
        return min(self.retry_backoff * 2 ** (attempt - 1), self.max_backoff)
