"""A prompt that lets the user pick one option with the arrow keys."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from termsurvey.config import OptionAnswer, PromptConfig, option_answer_list, paginate
from termsurvey.renderer import Renderer, color
from termsurvey.terminal.sequences import (
    KEY_ARROW_DOWN,
    KEY_ARROW_UP,
    KEY_BACKSPACE,
    KEY_DELETE,
    KEY_DELETE_LINE,
    KEY_DELETE_WORD,
    KEY_END_TRANSMISSION,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_INTERRUPT,
    KEY_SPACE,
    KEY_TAB,
    InterruptError,
)

FilterFunc = Callable[[str, str, int], bool]
DescriptionFunc = Callable[[str, int], str]


@dataclass
class SelectTemplateData:
    """What the select prompt is drawn from."""

    select: Optional["Select"] = None
    page_entries: List[OptionAnswer] = field(default_factory=list)
    selected_index: int = 0
    answer: str = ""
    show_answer: bool = False
    show_help: bool = False
    description: Optional[DescriptionFunc] = None
    config: Optional[PromptConfig] = None
    current_opt: Optional[OptionAnswer] = None
    current_index: int = 0

    def iterate_option(self, ix: int, opt: OptionAnswer) -> "SelectTemplateData":
        """A copy set up to draw the option ``opt`` at page position ``ix``."""
        return dataclasses.replace(self, current_index=ix, current_opt=opt)

    def get_description(self, opt: OptionAnswer) -> str:
        """The description of ``opt``, or an empty string."""
        if self.description is None:
            return ""
        return self.description(opt.value, opt.index)


def render_select_option(data: SelectTemplateData) -> str:
    """Text of the option held in ``data.current_opt``."""
    icons = data.config.icons  # type: ignore[union-attr]
    opt = data.current_opt
    if opt is None:
        raise ValueError("no option to render")
    if data.selected_index == data.current_index:
        parts = [color(icons.select_focus.format), icons.select_focus.text, " "]
    else:
        parts = [color("default"), "  "]
    parts.append(opt.value)
    description = data.get_description(opt)
    if description:
        parts += [" - ", color("cyan"), description]
    parts += [color("reset"), "\n"]
    return "".join(parts)


def render_select(data: SelectTemplateData) -> str:
    """Text of the whole select prompt, either asking or showing the answer."""
    config = data.config
    if config is None:
        raise ValueError("select template needs a prompt configuration")
    icons = config.icons
    select = data.select
    help_text = select.help if select is not None else ""
    message = select.message if select is not None else ""
    filter_message = select.filter_message if select is not None else ""

    parts: List[str] = []
    if data.show_help:
        parts += [color(icons.help.format), icons.help.text, " ", help_text, color("reset"), "\n"]
    parts += [
        color(icons.question.format),
        icons.question.text,
        " ",
        color("reset"),
        color("default+hb"),
        message,
        filter_message,
        color("reset"),
    ]
    if data.show_answer:
        parts += [color("cyan"), " ", data.answer, color("reset"), "\n"]
    else:
        hint = "[Use arrows to move, type to filter"
        if help_text and not data.show_help:
            hint += f", {config.help_input} for more help"
        parts += ["  ", color("cyan"), hint, "]", color("reset"), "\n"]
        parts += [
            render_select_option(data.iterate_option(ix, opt))
            for ix, opt in enumerate(data.page_entries)
        ]
    return "".join(parts)


def _option_renderer(data: SelectTemplateData) -> Callable[[int, OptionAnswer], str]:
    return lambda ix, opt: render_select_option(data.iterate_option(ix, opt))


@dataclass(eq=False)
class Select(Renderer):
    """Asks the user to choose one of ``options``; the answer is an OptionAnswer.

    ``default`` may be an option's text or its index.
    """

    message: str = ""
    options: List[str] = field(default_factory=list)
    default: Any = None
    help: str = ""
    page_size: int = 0
    vim_mode: bool = False
    filter_message: str = ""
    filter: Optional[FilterFunc] = None
    description: Optional[DescriptionFunc] = None

    def __post_init__(self) -> None:
        Renderer.__init__(self)
        self._filter_text = ""
        self._selected_index = 0
        self._use_default = False
        self._showing_help = False

    def _page_size(self, config: PromptConfig) -> int:
        return self.page_size or config.page_size

    def on_change(self, key: str, config: PromptConfig) -> bool:
        """Handle one key press; returns True when the user has made a choice."""
        options = self.filter_options(config)
        old_filter = self._filter_text

        if key in (KEY_ENTER, "\n"):
            return bool(options) and self._selected_index < len(options)
        elif (key == KEY_ARROW_UP or (self.vim_mode and key == "k")) and options:
            self._use_default = False
            if self._selected_index == 0:
                self._selected_index = len(options) - 1
            else:
                self._selected_index -= 1
        elif (key in (KEY_TAB, KEY_ARROW_DOWN) or (self.vim_mode and key == "j")) and options:
            self._use_default = False
            if self._selected_index == len(options) - 1:
                self._selected_index = 0
            else:
                self._selected_index += 1
        elif key == config.help_input and self.help:
            self._showing_help = True
        elif key == KEY_ESCAPE:
            self.vim_mode = not self.vim_mode
        elif key in (KEY_DELETE_WORD, KEY_DELETE_LINE):
            self._filter_text = ""
        elif key in (KEY_DELETE, KEY_BACKSPACE):
            self._filter_text = self._filter_text[:-1]
        elif key >= KEY_SPACE:
            self._filter_text += key
            self.vim_mode = False
            self._use_default = False

        self.filter_message = f" {self._filter_text}" if self._filter_text else ""
        if old_filter != self._filter_text:
            options = self.filter_options(config)
            if options and len(options) <= self._selected_index:
                self._selected_index = len(options) - 1

        opts, idx = paginate(self._page_size(config), options, self._selected_index)
        data = SelectTemplateData(
            select=self,
            selected_index=idx,
            show_help=self._showing_help,
            description=self.description,
            page_entries=opts,
            config=config,
        )
        self.render_with_cursor_offset(render_select, data, opts, idx, _option_renderer(data))
        return False

    def filter_options(self, config: PromptConfig) -> List[OptionAnswer]:
        """The options that pass the current filter text, with their original indexes."""
        if not self._filter_text:
            return option_answer_list(self.options)
        keep = self.filter if self.filter is not None else config.filter
        if keep is None:
            raise ValueError("no filter is configured")
        return [
            OptionAnswer(value=opt, index=i)
            for i, opt in enumerate(self.options)
            if keep(self._filter_text, opt, i)
        ]

    def prompt(self, config: PromptConfig) -> OptionAnswer:
        """Ask the user and return the chosen option."""
        if not self.options:
            raise ValueError("please provide options to select from")

        sel = 0
        if self.default != "":
            for i, opt in enumerate(self.options):
                if opt == self.default:
                    sel = i
                    break
        self._selected_index = sel

        opts, idx = paginate(self._page_size(config), option_answer_list(self.options), sel)

        cursor = self.new_cursor()
        cursor.save()
        cursor.hide()
        try:
            data = SelectTemplateData(
                select=self,
                selected_index=idx,
                description=self.description,
                show_help=self._showing_help,
                page_entries=opts,
                config=config,
            )
            self.render_with_cursor_offset(render_select, data, opts, idx, _option_renderer(data))

            self._use_default = True

            reader = self.new_rune_reader()
            try:
                reader.set_term_mode()
            except OSError:
                pass
            try:
                while True:
                    key = reader.read_rune()
                    if key == KEY_INTERRUPT:
                        raise InterruptError()
                    if key == KEY_END_TRANSMISSION:
                        break
                    if self.on_change(key, config):
                        break
            finally:
                try:
                    reader.restore_term_mode()
                except OSError:
                    pass
        finally:
            cursor.restore()
            cursor.show()

        options = self.filter_options(config)
        self._filter_text = ""
        self.filter_message = ""

        value = ""
        if self._use_default or self._selected_index >= len(options):
            if self.default is not None:
                if isinstance(self.default, str):
                    value = self.default
                elif isinstance(self.default, int) and not isinstance(self.default, bool):
                    value = self.options[self.default]
                else:
                    raise TypeError("default value of select must be an int or string")
            elif options:
                value = options[0].value
        else:
            value = options[self._selected_index].value

        index = -1
        for i, option in enumerate(self.options):
            if option == value:
                index = i

        return OptionAnswer(value=value, index=index)

    def cleanup(self, config: PromptConfig, value: OptionAnswer) -> None:
        """Redraw the prompt showing the chosen answer."""
        cursor = self.new_cursor()
        cursor.restore()
        self.render(
            render_select,
            SelectTemplateData(
                select=self,
                answer=value.value,
                show_answer=True,
                description=self.description,
                config=config,
            ),
        )