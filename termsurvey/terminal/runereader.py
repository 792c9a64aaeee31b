"""Reading keys and edited lines from a terminal in non-canonical mode."""

from __future__ import annotations

import codecs
import os
import unicodedata
from collections import deque
from typing import IO, Any, Callable, Optional, Tuple

from termsurvey.terminal.cursor import Cursor
from termsurvey.terminal.sequences import (
    COORDINATE_SYSTEM_BEGIN,
    IGNORE_KEY,
    KEY_ARROW_DOWN,
    KEY_ARROW_LEFT,
    KEY_ARROW_RIGHT,
    KEY_ARROW_UP,
    KEY_BACKSPACE,
    KEY_DELETE,
    KEY_END_TRANSMISSION,
    KEY_ESCAPE,
    KEY_INTERRUPT,
    SPECIAL_KEY_DELETE,
    SPECIAL_KEY_END,
    SPECIAL_KEY_HOME,
    Coord,
    EraseLineMode,
    InterruptError,
    Stdio,
    erase_line,
    sound_bell,
)

try:
    import termios
except ImportError:  # pragma: no cover - platforms without termios
    termios = None  # type: ignore[assignment]

_NORMAL_KEYPAD = "["
_APPLICATION_KEYPAD = "O"
_CHUNK = 4096

_KEYPAD_KEYS = {
    "A": KEY_ARROW_UP,
    "B": KEY_ARROW_DOWN,
    "C": KEY_ARROW_RIGHT,
    "D": KEY_ARROW_LEFT,
    "F": SPECIAL_KEY_END,
    "H": SPECIAL_KEY_HOME,
}

OnRune = Callable[[str, str], Tuple[str, bool]]


def rune_width(ch: str) -> int:
    """Number of terminal cells the character occupies."""
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def new_ansi_stdout(out: IO[Any]) -> IO[Any]:
    """Return a stream that understands ANSI sequences; terminals already do."""
    return out


class _InputBuffer:
    """A first-in first-out store for input that was read ahead."""

    def __init__(self) -> None:
        self._data: deque[str] = deque()

    def write(self, text: Any) -> int:
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("latin-1")
        self._data.extend(text)
        return len(text)

    def read(self, size: int = -1) -> str:
        if size is None or size < 0:
            size = len(self._data)
        count = min(size, len(self._data))
        return "".join(self._data.popleft() for _ in range(count))

    def __len__(self) -> int:
        return len(self._data)


class BufferedReader:
    """Reads from ``buffer`` first and from ``in_`` once the buffer is empty."""

    def __init__(self, in_: Optional[IO[Any]], buffer: Optional[Any] = None) -> None:
        self.in_ = in_
        self.buffer = buffer if buffer is not None else _InputBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def read(self, size: int) -> str:
        """Return up to ``size`` characters; an empty string means end of input."""
        data = self.buffer.read(size)
        if data:
            return data
        return self._read_source(size)

    def _raw_read(self, size: int) -> Any:
        if self.in_ is None:
            raise ValueError("reader has no input stream")
        try:
            fd = self.in_.fileno()
        except (AttributeError, OSError, ValueError):
            return self.in_.read(size)
        return os.read(fd, size)

    def _read_source(self, size: int) -> str:
        while True:
            raw = self._raw_read(size)
            if isinstance(raw, str):
                return raw
            if not raw:
                return self._decoder.decode(b"", final=True)
            text = self._decoder.decode(raw)
            if text:
                return text


class RuneReader:
    """Reads single keys and whole edited lines from a terminal."""

    def __init__(self, stdio: Stdio) -> None:
        self.stdio = stdio
        self._reader = BufferedReader(stdio.in_)
        self._pending: deque[str] = deque()
        self._saved_term: Optional[list] = None

    @property
    def buffer(self) -> Any:
        """Where input read ahead by cursor queries is kept for later reads."""
        return self._reader.buffer

    def _fd(self) -> int:
        if termios is None:
            raise OSError("terminal modes are not supported on this platform")
        try:
            return self.stdio.in_.fileno()  # type: ignore[union-attr]
        except (AttributeError, OSError, ValueError) as exc:
            raise OSError("input is not a terminal") from exc

    def set_term_mode(self) -> None:
        """Turn off echo, line buffering and signal keys on the input terminal."""
        fd = self._fd()
        try:
            self._saved_term = termios.tcgetattr(fd)
            new_state = termios.tcgetattr(fd)
            new_state[3] &= ~(termios.ECHO | termios.ECHONL | termios.ICANON | termios.ISIG)
            new_state[6][termios.VMIN] = 1
            new_state[6][termios.VTIME] = 0
            termios.tcsetattr(fd, termios.TCSANOW, new_state)
        except termios.error as exc:
            raise OSError(str(exc)) from exc

    def restore_term_mode(self) -> None:
        """Put the input terminal back the way set_term_mode found it."""
        if self._saved_term is None:
            return
        fd = self._fd()
        try:
            termios.tcsetattr(fd, termios.TCSANOW, self._saved_term)
        except termios.error as exc:
            raise OSError(str(exc)) from exc

    def _next_char(self) -> str:
        if not self._pending:
            chunk = self._reader.read(_CHUNK)
            if not chunk:
                raise EOFError("end of input")
            self._pending.extend(chunk)
        return self._pending.popleft()

    def _discard(self) -> None:
        try:
            self._next_char()
        except EOFError:
            pass

    def read_rune(self) -> str:
        """Read one key, turning escape sequences into the key codes."""
        ch = self._next_char()
        if ch != KEY_ESCAPE:
            return ch
        if not self._pending:
            return KEY_ESCAPE
        keypad = self._next_char()
        if keypad not in (_NORMAL_KEYPAD, _APPLICATION_KEYPAD):
            raise ValueError(
                f"unexpected escape sequence from terminal: {KEY_ESCAPE + keypad!r}"
            )
        ch = self._next_char()
        if ch in _KEYPAD_KEYS:
            return _KEYPAD_KEYS[ch]
        if ch == "3" and keypad == _NORMAL_KEYPAD:
            self._discard()
            return SPECIAL_KEY_DELETE
        self._discard()
        return IGNORE_KEY

    def _write(self, text: str) -> None:
        out = self.stdio.out
        if out is None:
            raise ValueError("reader has no output stream")
        out.write(text)
        flush = getattr(out, "flush", None)
        if flush is not None:
            flush()

    def _print_char(self, ch: str, mask: Optional[str]) -> None:
        self._write(mask if mask else ch)

    def read_line(self, mask: Optional[str] = "", on_rune: Optional[OnRune] = None) -> str:
        """Read an edited line of input, echoing ``mask`` instead of each key if given."""
        return self.read_line_with_default(mask, "", on_rune)

    def read_line_with_default(
        self,
        mask: Optional[str] = "",
        default: str = "",
        on_rune: Optional[OnRune] = None,
    ) -> str:
        """Read an edited line of input that starts out holding ``default``.

        ``on_rune`` sees every key with the line so far and returns the line to
        give back and whether to stop reading.
        """
        out = self.stdio.out
        line: list[str] = []
        index = 0
        cursor = Cursor(in_=self.stdio.in_, out=out)

        terminal_size = cursor.size(self.buffer)
        start = cursor.location(self.buffer)
        current = Coord(start.x, start.y)

        def increment() -> None:
            if current.cursor_is_at_line_end(terminal_size):
                current.x = COORDINATE_SYSTEM_BEGIN
                current.y += 1
            else:
                current.x += 1

        def decrement() -> None:
            if current.cursor_is_at_line_begin():
                current.x = terminal_size.x
                current.y -= 1
            else:
                current.x -= 1

        if default:
            index = len(default)
            self._write(default)
            line = list(default)
            for _ in default:
                increment()

        while True:
            key = self.read_rune()

            if on_rune is not None:
                result, stop = on_rune(key, "".join(line))
                if stop:
                    return result

            if key in ("\r", "\n", KEY_END_TRANSMISSION):
                while index > 0:
                    if current.cursor_is_at_line_begin():
                        erase_line(out, EraseLineMode.END)
                        cursor.previous_line(1)
                        cursor.forward(terminal_size.x)
                    else:
                        cursor.back(1)
                    decrement()
                    index -= 1
                cursor.move_next_line(current, terminal_size)
                return "".join(line)

            if key == KEY_INTERRUPT:
                self._write("\r\n")
                raise InterruptError()

            if key in (KEY_BACKSPACE, KEY_DELETE):
                if index > 0 and line:
                    if index == len(line):
                        cells = rune_width(line[-1])
                        line.pop()
                        if current.x == 1:
                            cursor.previous_line(1)
                            cursor.forward(terminal_size.x)
                        else:
                            cursor.back(cells)
                        erase_line(out, EraseLineMode.END)
                    else:
                        cells = rune_width(line[index - 1])
                        del line[index - 1]
                        cursor.save()
                        cursor.back(cells)
                        for ch in line[index - 1:]:
                            erase_line(out, EraseLineMode.END)
                            self._print_char(ch, mask)
                        if current.y < terminal_size.y:
                            cursor.next_line(1)
                            erase_line(out, EraseLineMode.END)
                        cursor.restore()
                        if current.cursor_is_at_line_begin():
                            cursor.previous_line(1)
                            cursor.forward(terminal_size.x)
                        else:
                            cursor.back(cells)
                    index -= 1
                    decrement()
                else:
                    sound_bell(out)
                continue

            if key == KEY_ARROW_LEFT:
                if index > 0:
                    if current.cursor_is_at_line_begin():
                        cursor.previous_line(1)
                        cursor.forward(terminal_size.x)
                    else:
                        cursor.back(rune_width(line[index - 1]))
                    index -= 1
                    decrement()
                else:
                    sound_bell(out)
                continue

            if key == KEY_ARROW_RIGHT:
                if index < len(line):
                    if current.cursor_is_at_line_end(terminal_size):
                        cursor.next_line(1)
                    else:
                        cursor.forward(rune_width(line[index]))
                    index += 1
                    increment()
                else:
                    sound_bell(out)
                continue

            if key == SPECIAL_KEY_HOME:
                while index > 0:
                    if current.cursor_is_at_line_begin():
                        cursor.previous_line(1)
                        cursor.forward(terminal_size.x)
                        current.y -= 1
                        current.x = terminal_size.x
                    else:
                        width = rune_width(line[index - 1])
                        cursor.back(width)
                        current.x -= width
                    index -= 1
                continue

            if key == SPECIAL_KEY_END:
                while index != len(line):
                    if current.cursor_is_at_line_end(terminal_size):
                        cursor.next_line(1)
                        current.y += 1
                        current.x = COORDINATE_SYSTEM_BEGIN
                    else:
                        width = rune_width(line[index])
                        cursor.forward(width)
                        current.x += width
                    index += 1
                continue

            if key == SPECIAL_KEY_DELETE:
                if index != len(line):
                    cursor.save()
                    del line[index]
                    for ch in line[index:]:
                        erase_line(out, EraseLineMode.END)
                        self._print_char(ch, mask)
                    if current.y < terminal_size.y:
                        cursor.next_line(1)
                        erase_line(out, EraseLineMode.END)
                    cursor.restore()
                    if not line or index == len(line):
                        erase_line(out, EraseLineMode.END)
                continue

            if unicodedata.category(key) == "Cc" or key == IGNORE_KEY:
                continue

            if index == len(line):
                line.append(key)
                index += 1
                increment()
                self._print_char(key, mask)
            else:
                line.insert(index, key)
                cursor.save()
                erase_line(out, EraseLineMode.END)
                for ch in line[index:]:
                    erase_line(out, EraseLineMode.END)
                    self._print_char(ch, mask)
                    increment()
                if current.cursor_is_at_line_end(terminal_size) and current.y == terminal_size.y:
                    self._write("\n")
                    cursor.restore()
                    cursor.previous_line(1)
                else:
                    cursor.restore()
                fresh = cursor.location(self.buffer)
                current.x, current.y = fresh.x, fresh.y
                if current.cursor_is_at_line_end(terminal_size):
                    cursor.next_line(1)
                else:
                    cursor.forward(rune_width(key))
                index += 1
                increment()