"""Key value type and the decoder from raw terminal bytes."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar


class KeyCode(enum.Enum):
    """Kind of decoded key."""

    CHAR = "char"
    CTRL = "ctrl"
    ALT = "alt"
    FUNCTION = "function"
    ENTER = "enter"
    TAB = "tab"
    BACK_TAB = "back_tab"
    BACKSPACE = "backspace"
    ESC = "esc"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    INSERT = "insert"
    DELETE = "delete"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    UNKNOWN = "unknown"
    NONE = "none"


@dataclass(frozen=True)
class Key:
    """A decoded key press, or the ``Key.NONE`` heartbeat.

    ``char`` holds the character for CHAR/CTRL/ALT keys and ``number`` the
    index of a function key; both are empty for every other code.
    """

    code: KeyCode
    char: str = ""
    number: int = 0

    NONE: ClassVar[Key]

    @classmethod
    def from_char(cls, char: str) -> Key:
        return cls(KeyCode.CHAR, char=char)

    @classmethod
    def ctrl(cls, char: str) -> Key:
        return cls(KeyCode.CTRL, char=char)

    @classmethod
    def alt(cls, char: str) -> Key:
        return cls(KeyCode.ALT, char=char)

    @classmethod
    def function(cls, number: int) -> Key:
        return cls(KeyCode.FUNCTION, number=number)

    @property
    def is_tick(self) -> bool:
        return self.code is KeyCode.NONE

    def __str__(self) -> str:
        if self.code is KeyCode.CHAR:
            return self.char
        if self.code is KeyCode.CTRL:
            return f"<Ctrl+{self.char}>"
        if self.code is KeyCode.ALT:
            return f"<Alt+{self.char}>"
        if self.code is KeyCode.FUNCTION:
            return f"<F{self.number}>"
        return f"<{self.code.value.replace('_', ' ').title()}>"


Key.NONE = Key(KeyCode.NONE)

# Escape sequences without the leading ESC
_ESCAPE_SEQUENCES = {
    "[A": KeyCode.UP,
    "[B": KeyCode.DOWN,
    "[C": KeyCode.RIGHT,
    "[D": KeyCode.LEFT,
    "[H": KeyCode.HOME,
    "[F": KeyCode.END,
    "OH": KeyCode.HOME,
    "OF": KeyCode.END,
    "[1~": KeyCode.HOME,
    "[2~": KeyCode.INSERT,
    "[3~": KeyCode.DELETE,
    "[4~": KeyCode.END,
    "[5~": KeyCode.PAGE_UP,
    "[6~": KeyCode.PAGE_DOWN,
    "[7~": KeyCode.HOME,
    "[8~": KeyCode.END,
    "[Z": KeyCode.BACK_TAB,
}

_FUNCTION_SEQUENCES = {
    "OP": 1,
    "OQ": 2,
    "OR": 3,
    "OS": 4,
    "[11~": 1,
    "[12~": 2,
    "[13~": 3,
    "[14~": 4,
    "[15~": 5,
    "[17~": 6,
    "[18~": 7,
    "[19~": 8,
    "[20~": 9,
    "[21~": 10,
    "[23~": 11,
    "[24~": 12,
}

_UNKNOWN = Key(KeyCode.UNKNOWN)


def decode_key(data: bytes) -> Key:
    """Decode the bytes of exactly one key press.

    Never raises: anything unrecognised decodes to ``KeyCode.UNKNOWN``.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return _UNKNOWN
    if not text:
        return _UNKNOWN

    if text.startswith("\x1b"):
        return _decode_escape(text[1:])

    if len(text) != 1:
        return _UNKNOWN

    if text in ("\r", "\n"):
        return Key(KeyCode.ENTER)
    if text == "\t":
        return Key(KeyCode.TAB)
    if text in ("\x7f", "\x08"):
        return Key(KeyCode.BACKSPACE)

    code = ord(text)
    if 1 <= code <= 26:
        return Key.ctrl(chr(code + ord("a") - 1))
    if text.isprintable():
        return Key.from_char(text)
    return _UNKNOWN


def _decode_escape(rest: str) -> Key:
    if not rest:
        return Key(KeyCode.ESC)
    if rest in _ESCAPE_SEQUENCES:
        return Key(_ESCAPE_SEQUENCES[rest])
    if rest in _FUNCTION_SEQUENCES:
        return Key.function(_FUNCTION_SEQUENCES[rest])
    # ESC followed by a single printable character is how terminals send Alt
    if len(rest) == 1 and rest.isprintable():
        return Key.alt(rest)
    return _UNKNOWN
