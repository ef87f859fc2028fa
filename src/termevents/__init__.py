"""termevents — merged key and heartbeat event stream for terminal apps."""

from termevents.config import EventConfig
from termevents.errors import (
    ChannelClosed,
    EventError,
    PollFailure,
    ReadFailure,
    SendFailure,
)
from termevents.keys import Key, KeyCode, decode_key
from termevents.source import EventSource

__version__ = "0.1.0"

__all__ = [
    "ChannelClosed",
    "EventConfig",
    "EventError",
    "EventSource",
    "Key",
    "KeyCode",
    "PollFailure",
    "ReadFailure",
    "SendFailure",
    "decode_key",
]
