"""Drawing prompts on the terminal and erasing what was drawn before."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Any, Callable, Sequence, Tuple

from termsurvey.config import Icon, OptionAnswer, PromptConfig, compute_cursor_offset
from termsurvey.terminal.cursor import Cursor
from termsurvey.terminal.runereader import RuneReader, new_ansi_stdout
from termsurvey.terminal.sequences import EraseLineMode, Stdio, erase_line

Template = Callable[[Any], str]
OptionRenderer = Callable[[int, OptionAnswer], str]

_ANSI_PATTERN = re.compile(r"\x1b(?:\[[0-9;?]*[ -/]*[@-~]|[78])")

_COLORS = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
    "default": 9,
}

_ATTRIBUTES = (("b", "1"), ("B", "5"), ("u", "4"), ("i", "7"), ("s", "9"))

# Terminals whose width cannot be read are treated as very wide.
_FALLBACK_WIDTH = 10000


@dataclass
class _ColorSettings:
    enabled: bool = True


_color_settings = _ColorSettings()


def set_color_enabled(enabled: bool) -> bool:
    """Turn colour output on or off; returns the previous setting."""
    previous = _color_settings.enabled
    _color_settings.enabled = bool(enabled)
    return previous


def color(spec: str) -> str:
    """Return the escape sequence for a style such as ``"green+hb"`` or ``"red:white"``."""
    if not _color_settings.enabled or not spec or spec == "off":
        return ""
    if spec == "reset":
        return "\x1b[0m"

    fg_part, _, bg_part = spec.partition(":")
    fg_key, _, fg_style = fg_part.partition("+")
    bg_key, _, bg_style = bg_part.partition("+")

    codes = [code for letter, code in _ATTRIBUTES if letter in fg_style]
    base = 90 if "h" in fg_style else 30
    if fg_key.isdigit():
        codes.append(f"38;5;{int(fg_key)}")
    else:
        codes.append(str(base + _COLORS.get(fg_key, 0)))

    if bg_key:
        bg_base = 100 if "h" in bg_style else 40
        if bg_key.isdigit():
            codes.append(f"48;5;{int(bg_key)}")
        else:
            codes.append(str(bg_base + _COLORS.get(bg_key, 0)))

    return "\x1b[" + ";".join(codes) + "m"


def strip_ansi(text: str) -> str:
    """Remove terminal escape sequences from ``text``."""
    return _ANSI_PATTERN.sub("", text)


@dataclass
class ErrorTemplateData:
    """What the validation error message is drawn from."""

    error: BaseException
    icon: Icon


def render_error_template(data: ErrorTemplateData) -> str:
    """Text shown when an answer fails validation."""
    return (
        f"{color(data.icon.format)}{data.icon.text} Sorry, your reply was invalid: "
        f"{data.error}{color('reset')}\n"
    )


def _run_template(template: Template, data: Any) -> Tuple[str, str]:
    text = template(data)
    return text, strip_ansi(text)


class Renderer:
    """Prints prompt text and keeps track of it so it can be redrawn in place."""

    def __init__(self, stdio: Stdio | None = None) -> None:
        self.stdio = stdio if stdio is not None else Stdio()
        self._rendered_errors = ""
        self._rendered_text = ""

    def with_stdio(self, stdio: Stdio) -> None:
        """Use ``stdio`` for all further input and output."""
        self.stdio = stdio

    def new_rune_reader(self) -> RuneReader:
        """A key reader over this renderer's streams."""
        return RuneReader(self.stdio)

    def new_cursor(self) -> Cursor:
        """A cursor over this renderer's streams."""
        return Cursor(in_=self.stdio.in_, out=self.stdio.out)

    def _print(self, text: str) -> None:
        out = new_ansi_stdout(self.stdio.out)
        out.write(text)
        flush = getattr(out, "flush", None)
        if flush is not None:
            flush()

    def error(self, config: PromptConfig, invalid: BaseException) -> None:
        """Clear the prompt and show why the last answer was rejected."""
        self._reset_prompt(self.count_lines(self._rendered_errors))
        self._rendered_errors = ""

        self._reset_prompt(self.count_lines(self._rendered_text))
        self._rendered_text = ""

        user_out, layout_out = _run_template(
            render_error_template, ErrorTemplateData(error=invalid, icon=config.icons.error)
        )
        self._print(user_out)
        self._rendered_errors += layout_out

    def offset_cursor(self, offset: int) -> None:
        """Move the cursor ``offset`` lines up."""
        cursor = self.new_cursor()
        for _ in range(offset):
            cursor.previous_line(1)

    def render(self, template: Template, data: Any) -> None:
        """Erase what was drawn last and draw ``template`` applied to ``data``."""
        self._reset_prompt(self.count_lines(self._rendered_text))
        self._rendered_text = ""

        user_out, layout_out = _run_template(template, data)
        self._print(user_out)
        self.append_rendered_text(layout_out)

    def render_with_cursor_offset(
        self,
        template: Template,
        data: Any,
        opts: Sequence[OptionAnswer],
        idx: int,
        render_option: OptionRenderer,
    ) -> None:
        """Render, then leave the cursor on the line of the selected option."""
        cursor = self.new_cursor()
        cursor.restore()

        self.render(template, data)
        cursor.save()

        offset = compute_cursor_offset(
            lambda ix, opt: strip_ansi(render_option(ix, opt)),
            opts,
            idx,
            self.term_width_safe(),
        )
        self.offset_cursor(offset)

    def append_rendered_text(self, text: str) -> None:
        """Record text printed outside render so the next redraw erases it too."""
        self._rendered_text += text

    def _reset_prompt(self, lines: int) -> None:
        out = self.stdio.out
        cursor = self.new_cursor()
        cursor.horizontal_absolute(0)
        erase_line(out, EraseLineMode.ALL)
        for _ in range(lines):
            cursor.previous_line(1)
            erase_line(out, EraseLineMode.ALL)

    def term_width_safe(self) -> int:
        """Width of the output terminal, or a very wide width when it is unknown."""
        try:
            width = os.get_terminal_size(self.stdio.out.fileno()).columns  # type: ignore[union-attr]
        except (AttributeError, OSError, ValueError):
            width = 0
        return width if width else _FALLBACK_WIDTH

    def count_lines(self, text: str) -> int:
        """Count the newlines in ``text`` plus the extra lines long lines wrap onto."""
        width = self.term_width_safe()
        count = text.count("\n")
        for segment in text.split("\n"):
            line_width = len(segment)
            if line_width > width:
                count += line_width // width
                if line_width % width == 0:
                    count -= 1
        return count