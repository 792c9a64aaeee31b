"""Cursor movement and position queries over ANSI escape sequences."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import IO, Any, Optional

from termsurvey.terminal.sequences import Coord

_DSR_PATTERN = re.compile(r"\x1b\[(\d+);(\d+)R$")


@dataclass
class Cursor:
    """Moves and queries the terminal cursor through ``out`` and ``in_``."""

    in_: Optional[IO[Any]] = None
    out: Optional[IO[Any]] = None

    def _write(self, text: str) -> None:
        if self.out is None:
            raise ValueError("cursor has no output stream")
        self.out.write(text)
        flush = getattr(self.out, "flush", None)
        if flush is not None:
            flush()

    def up(self, n: int) -> None:
        """Move the cursor n cells up."""
        self._write(f"\x1b[{n}A")

    def down(self, n: int) -> None:
        """Move the cursor n cells down."""
        self._write(f"\x1b[{n}B")

    def forward(self, n: int) -> None:
        """Move the cursor n cells right."""
        self._write(f"\x1b[{n}C")

    def back(self, n: int) -> None:
        """Move the cursor n cells left."""
        self._write(f"\x1b[{n}D")

    def next_line(self, n: int) -> None:
        """Move the cursor to the beginning of the next line."""
        self.down(1)
        self.horizontal_absolute(0)

    def previous_line(self, n: int) -> None:
        """Move the cursor to the beginning of the previous line."""
        self.up(1)
        self.horizontal_absolute(0)

    def horizontal_absolute(self, x: int) -> None:
        """Move the cursor to column x of the current line."""
        self._write(f"\x1b[{x}G")

    def show(self) -> None:
        """Make the cursor visible."""
        self._write("\x1b[?25h")

    def hide(self) -> None:
        """Hide the cursor."""
        self._write("\x1b[?25l")

    def _move(self, x: int, y: int) -> None:
        self._write(f"\x1b[{x};{y}f")

    def save(self) -> None:
        """Save the current cursor position."""
        self._write("\x1b7")

    def restore(self) -> None:
        """Restore the last saved cursor position."""
        self._write("\x1b8")

    def move_next_line(self, cur: Coord, terminal_size: Coord) -> None:
        """Move to the next line, scrolling first when on the bottom row."""
        if cur.y == terminal_size.y:
            self._write("\n")
        self.next_line(1)

    def location(self, buf: Optional[IO[Any]]) -> Coord:
        """Ask the terminal where the cursor is.

        Input that arrives before the position report is written to ``buf``
        so that it is not lost.
        """
        if self.in_ is None:
            raise ValueError("cursor has no input stream")
        self._write("\x1b[6n")

        while True:
            pieces = []
            while True:
                ch = self.in_.read(1)
                if not ch:
                    raise EOFError("input ended before the cursor position was reported")
                if isinstance(ch, bytes):
                    ch = ch.decode("latin-1")
                pieces.append(ch)
                if ch == "R":
                    break
            text = "".join(pieces)
            found = _DSR_PATTERN.search(text)
            if found is None:
                if buf is not None:
                    buf.write(text)
                continue
            if buf is not None and found.start() > 0:
                buf.write(text[: found.start()])
            row, col = int(found.group(1)), int(found.group(2))
            return Coord(col, row)

    def size(self, buf: Optional[IO[Any]]) -> Coord:
        """Return the terminal's width and height as a Coord."""
        self.hide()
        try:
            self.save()
            try:
                self._move(999, 999)
                return self.location(buf)
            finally:
                self.restore()
        finally:
            self.show()