"""Key codes, erase modes, coordinates and stdio bundles for terminal prompts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import IO, Any, Optional

KEY_ARROW_LEFT = "\x02"
KEY_ARROW_RIGHT = "\x06"
KEY_ARROW_UP = "\x10"
KEY_ARROW_DOWN = "\x0e"
KEY_SPACE = " "
KEY_ENTER = "\r"
KEY_BACKSPACE = "\b"
KEY_DELETE = "\x7f"
KEY_INTERRUPT = "\x03"
KEY_END_TRANSMISSION = "\x04"
KEY_ESCAPE = "\x1b"
KEY_DELETE_WORD = "\x17"  # Ctrl+W
KEY_DELETE_LINE = "\x18"  # Ctrl+X
SPECIAL_KEY_HOME = "\x01"
SPECIAL_KEY_END = "\x11"
SPECIAL_KEY_DELETE = "\x12"
IGNORE_KEY = "\x00"
KEY_TAB = "\t"

# Terminal coordinates reported by the device start at 1.
COORDINATE_SYSTEM_BEGIN = 1


class EraseLineMode(IntEnum):
    """Which part of the current line an erase sequence clears."""

    END = 0
    START = 1
    ALL = 2


class InterruptError(Exception):
    """Raised when the user interrupts a prompt (Ctrl+C)."""

    def __init__(self, message: str = "interrupt") -> None:
        super().__init__(message)


@dataclass
class Coord:
    """A cursor position or terminal size, in columns (x) and rows (y)."""

    x: int = 0
    y: int = 0

    def cursor_is_at_line_end(self, size: "Coord") -> bool:
        """Whether this position sits in the last column of a terminal of ``size``."""
        return self.x == size.x

    def cursor_is_at_line_begin(self) -> bool:
        """Whether this position sits in the first column."""
        return self.x == COORDINATE_SYSTEM_BEGIN


@dataclass
class Stdio:
    """The input, output and error streams a prompt talks to."""

    in_: Optional[IO[Any]] = None
    out: Optional[IO[Any]] = None
    err: Optional[IO[Any]] = None


def _write(out: IO[Any], text: str) -> None:
    out.write(text)
    flush = getattr(out, "flush", None)
    if flush is not None:
        flush()


def erase_line(out: IO[Any], mode: EraseLineMode) -> None:
    """Erase part of the current line according to ``mode``."""
    _write(out, f"\x1b[{int(mode)}K")


def sound_bell(out: IO[Any]) -> None:
    """Ring the terminal bell."""
    _write(out, "\a")