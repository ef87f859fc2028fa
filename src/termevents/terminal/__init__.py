"""Terminal input providers consumed by the input pump."""

from termevents.terminal.base import RawEvent, RawEventKind, TerminalInput
from termevents.terminal.stdin import StdinTerminal

__all__ = ["RawEvent", "RawEventKind", "StdinTerminal", "TerminalInput"]
