import pytest

from termsurvey.config import (
    AskOptions,
    Icon,
    IconSet,
    OptionAnswer,
    compute_cursor_offset,
    default_ask_options,
    default_filter,
    default_icons,
    default_prompt_config,
    option_answer_list,
    paginate,
    with_filter,
    with_help_input,
    with_icons,
    with_keep_filter,
    with_page_size,
    with_remove_select_all,
    with_remove_select_none,
    with_show_cursor,
    with_stdio,
    with_validator,
)


def test_option_answer_list_keeps_positions():
    assert option_answer_list(["a", "b"]) == [
        OptionAnswer(value="a", index=0),
        OptionAnswer(value="b", index=1),
    ]


def test_default_prompt_config_values():
    config = default_prompt_config()
    assert config.page_size == 7
    assert config.help_input == "?"
    assert config.suggest_input == "tab"
    assert config.keep_filter is False
    assert config.remove_select_all is False


def test_default_icons():
    icons = default_icons()
    assert icons.error == Icon(text="X", format="red")
    assert icons.question == Icon(text="?", format="green+hb")
    assert icons.select_focus == Icon(text=">", format="cyan+b")
    assert icons.marked_option.text == "[x]"
    assert icons.unmarked_option.text == "[ ]"


def test_default_filter_is_case_insensitive():
    assert default_filter("RE", "green", 2) is True
    assert default_filter("re", "blue", 1) is False
    assert default_ask_options().prompt_config.filter("Bl", "BLUE", 0) is True


def test_options_modify_ask_options():
    options = AskOptions()

    def validator(value):
        return None

    def keep_long(text, value, index):
        return len(value) > 3

    for opt in (
        with_page_size(3),
        with_help_input("h"),
        with_keep_filter(True),
        with_show_cursor(True),
        with_remove_select_all(),
        with_remove_select_none(),
        with_validator(validator),
        with_filter(keep_long),
        with_stdio("in", "out", "err"),
    ):
        opt(options)
    config = options.prompt_config
    assert config.page_size == 3
    assert config.help_input == "h"
    assert config.keep_filter is True
    assert config.show_cursor is True
    assert config.remove_select_all is True
    assert config.remove_select_none is True
    assert config.filter is keep_long
    assert options.validators == [validator]
    assert (options.stdio.in_, options.stdio.out, options.stdio.err) == ("in", "out", "err")


def test_with_icons_edits_in_place():
    options = AskOptions(prompt_config=default_prompt_config())

    def change(icons: IconSet) -> None:
        icons.question.text = "Q"

    with_icons(change)(options)
    assert options.prompt_config.icons.question.text == "Q"
    assert options.prompt_config.icons.error.text == "X"


def test_pagination_too_few():
    choices = option_answer_list(["choice1", "choice2", "choice3"])
    page, idx = paginate(4, choices, 3)
    assert page == choices
    assert idx == 3


def test_pagination_first_half():
    choices = option_answer_list(
        ["choice1", "choice2", "choice3", "choice4", "choice5", "choice6"]
    )
    page, idx = paginate(4, choices, 2)
    assert page == choices[0:4]
    assert idx == 2


def test_pagination_middle():
    choices = option_answer_list(
        ["choice0", "choice1", "choice2", "choice3", "choice4", "choice5"]
    )
    page, idx = paginate(2, choices, 3)
    assert page == choices[2:4]
    assert idx == 1


def test_pagination_last_half():
    choices = option_answer_list(
        ["choice0", "choice1", "choice2", "choice3", "choice4", "choice5"]
    )
    page, idx = paginate(3, choices, 5)
    assert page == choices[3:6]
    assert idx == 2


def _select_renderer(selected):
    def render(ix, opt):
        marker = "> " if ix == selected else "  "
        return marker + opt.value + "\n"

    return render


@pytest.mark.parametrize(
    "options, ix, term_width, want",
    [
        ([], 0, 100, 0),
        (["one"], 0, 100, 1),
        (["one", "two"], 0, 100, 2),
        (["one", "two", "three", "four", "five"], 0, 100, 5),
        (["one", "two", "three", "four", "five"], 2, 100, 3),
        (["one", "two", "three", "four", "five"], 4, 100, 1),
        (
            [
                "wide one wide one wide one",
                "two",
                "three",
                "wide four wide four wide four",
                "five",
                "six",
            ],
            0,
            20,
            8,
        ),
        (
            [
                "wide one wide one wide one",
                "two",
                "three",
                "01234567890123456",
                "five",
                "six",
            ],
            0,
            20,
            7,
        ),
        (
            [
                "wide one wide one wide one",
                "wide two wide two wide two",
                "three",
                "four",
                "five",
                "six",
            ],
            2,
            20,
            4,
        ),
    ],
)
def test_compute_cursor_offset_select(options, ix, term_width, want):
    opts = option_answer_list(options)
    assert compute_cursor_offset(_select_renderer(ix), opts, ix, term_width) == want