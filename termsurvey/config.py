"""Prompt configuration, ask options, pagination and cursor offset helpers."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple

from termsurvey.terminal.sequences import Stdio

FilterFunc = Callable[[str, str, int], bool]
Validator = Callable[[Any], None]
AskOpt = Callable[["AskOptions"], None]


@dataclass(frozen=True)
class OptionAnswer:
    """An option picked by the user: its text and its position in the list."""

    value: str
    index: int


def option_answer_list(options: Sequence[str]) -> List[OptionAnswer]:
    """Wrap plain option strings as answers carrying their positions."""
    return [OptionAnswer(value=value, index=index) for index, value in enumerate(options)]


@dataclass
class Icon:
    """The text and colour format shown for one kind of icon."""

    text: str = ""
    format: str = ""


@dataclass
class IconSet:
    """The icons used by the prompts."""

    help_input: Icon = field(default_factory=Icon)
    error: Icon = field(default_factory=Icon)
    help: Icon = field(default_factory=Icon)
    question: Icon = field(default_factory=Icon)
    marked_option: Icon = field(default_factory=Icon)
    unmarked_option: Icon = field(default_factory=Icon)
    select_focus: Icon = field(default_factory=Icon)


@dataclass
class PromptConfig:
    """Settings shared by every prompt of one ask."""

    page_size: int = 0
    icons: IconSet = field(default_factory=IconSet)
    help_input: str = ""
    suggest_input: str = ""
    filter: Optional[FilterFunc] = None
    keep_filter: bool = False
    show_cursor: bool = False
    remove_select_all: bool = False
    remove_select_none: bool = False


@dataclass
class AskOptions:
    """Streams, extra validators and prompt settings for one ask."""

    stdio: Stdio = field(default_factory=Stdio)
    validators: List[Validator] = field(default_factory=list)
    prompt_config: PromptConfig = field(default_factory=PromptConfig)


def default_filter(filter_text: str, value: str, index: int) -> bool:
    """Keep an option whose text contains the filter, ignoring case."""
    return filter_text.lower() in value.lower()


def default_ask_options() -> AskOptions:
    """Ask options using the process's standard streams and the stock look."""
    return AskOptions(
        stdio=Stdio(in_=sys.stdin, out=sys.stdout, err=sys.stderr),
        prompt_config=PromptConfig(
            page_size=7,
            help_input="?",
            suggest_input="tab",
            icons=IconSet(
                error=Icon(text="X", format="red"),
                help=Icon(text="?", format="cyan"),
                question=Icon(text="?", format="green+hb"),
                marked_option=Icon(text="[x]", format="green"),
                unmarked_option=Icon(text="[ ]", format="default+hb"),
                select_focus=Icon(text=">", format="cyan+b"),
            ),
            filter=default_filter,
            keep_filter=False,
            show_cursor=False,
            remove_select_all=False,
            remove_select_none=False,
        ),
    )


def default_prompt_config() -> PromptConfig:
    """The stock prompt configuration."""
    return default_ask_options().prompt_config


def default_icons() -> IconSet:
    """The stock icon set."""
    return default_prompt_config().icons


def with_stdio(in_: Any, out: Any, err: Any) -> AskOpt:
    """Use the given input, output and error streams."""

    def apply(options: AskOptions) -> None:
        options.stdio = Stdio(in_=in_, out=out, err=err)

    return apply


def with_filter(filter_func: FilterFunc) -> AskOpt:
    """Use ``filter_func`` as the default option filter."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.filter = filter_func

    return apply


def with_keep_filter(keep_filter: bool) -> AskOpt:
    """Keep the filter text after a selection."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.keep_filter = keep_filter

    return apply


def with_remove_select_all() -> AskOpt:
    """Drop the select-all choice from multi-select prompts."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.remove_select_all = True

    return apply


def with_remove_select_none() -> AskOpt:
    """Drop the select-none choice from multi-select prompts."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.remove_select_none = True

    return apply


def with_validator(validator: Validator) -> AskOpt:
    """Run ``validator`` on every answer, after the question's own."""

    def apply(options: AskOptions) -> None:
        options.validators.append(validator)

    return apply


def with_page_size(page_size: int) -> AskOpt:
    """Show ``page_size`` options per page by default."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.page_size = page_size

    return apply


def with_help_input(char: str) -> AskOpt:
    """Use ``char`` as the key that shows a prompt's help."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.help_input = str(char)

    return apply


def with_icons(set_icons: Callable[[IconSet], None]) -> AskOpt:
    """Let ``set_icons`` change the icon set in place."""

    def apply(options: AskOptions) -> None:
        set_icons(options.prompt_config.icons)

    return apply


def with_show_cursor(show_cursor: bool) -> AskOpt:
    """Show or hide the cursor while prompting."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.show_cursor = show_cursor

    return apply


def paginate(
    page_size: int, choices: Sequence[OptionAnswer], sel: int
) -> Tuple[List[OptionAnswer], int]:
    """Return the page of ``choices`` holding ``sel`` and its position on that page."""
    total = len(choices)
    half = page_size // 2

    if total < page_size:
        start, end, cursor = 0, total, sel
    elif sel < half:
        start, end, cursor = 0, page_size, sel
    elif total - sel - 1 < half:
        start, end = total - page_size, total
        cursor = sel - start
    else:
        cursor = half
        start = sel - half
        end = sel + (page_size - half)

    return list(choices[start:end]), cursor


def compute_cursor_offset(
    render_option: Callable[[int, OptionAnswer], str],
    opts: Sequence[OptionAnswer],
    idx: int,
    term_width: int,
) -> int:
    """Count the screen lines from the selected option to the end of the list.

    ``render_option`` gives the text printed for the option at a page position;
    options wider than ``term_width`` add the lines they wrap onto.
    """
    offset = len(opts) - idx
    for position, opt in enumerate(opts):
        if position < idx:
            continue
        width = len(render_option(position, opt))
        if width > term_width:
            extra = width // term_width
            if width % term_width == 0:
                extra -= 1
            offset += extra
    return offset