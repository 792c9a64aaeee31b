import io

import pytest

from termsurvey.config import (
    OptionAnswer,
    compute_cursor_offset,
    default_icons,
    default_prompt_config,
    option_answer_list,
)
from termsurvey.renderer import set_color_enabled, strip_ansi
from termsurvey.select import (
    Select,
    SelectTemplateData,
    render_select,
    render_select_option,
)
from termsurvey.terminal.sequences import (
    KEY_ARROW_DOWN,
    KEY_ARROW_UP,
    KEY_BACKSPACE,
    KEY_DELETE,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_TAB,
    InterruptError,
    Stdio,
)


@pytest.fixture(autouse=True)
def _no_color():
    previous = set_color_enabled(False)
    yield
    set_color_enabled(previous)


def _attach(select, keys=""):
    out = io.StringIO()
    select.with_stdio(Stdio(in_=io.StringIO(keys), out=out, err=io.StringIO()))
    return out


def _run(select, keys, config=None):
    out = _attach(select, keys)
    answer = select.prompt(config or default_prompt_config())
    return answer, out.getvalue()


def _colors():
    return ["red", "blue", "green"]


# Rendering


def _render_prompt(select, data):
    out = _attach(select)
    data.select = select
    data.config = default_prompt_config()
    select.render(render_select, data)
    return out.getvalue()


WORDS = ["foo", "bar", "baz", "buz"]


def _word_prompt(help_text=""):
    return Select(message="Pick your word:", options=list(WORDS), default="baz", help=help_text)


def test_render_question():
    text = _render_prompt(
        _word_prompt(),
        SelectTemplateData(selected_index=2, page_entries=option_answer_list(WORDS)),
    )
    q = default_icons().question.text
    focus = default_icons().select_focus.text
    expected = "\n".join(
        [
            f"{q} Pick your word:  [Use arrows to move, type to filter]",
            "  foo",
            "  bar",
            f"{focus} baz",
            "  buz\n",
        ]
    )
    assert expected in text


def test_render_answer():
    text = _render_prompt(
        _word_prompt(),
        SelectTemplateData(answer="buz", show_answer=True, page_entries=option_answer_list(WORDS)),
    )
    assert f"{default_icons().question.text} Pick your word: buz\n" in text


def test_render_help_hidden():
    text = _render_prompt(
        _word_prompt("This is helpful"),
        SelectTemplateData(selected_index=2, page_entries=option_answer_list(WORDS)),
    )
    q = default_icons().question.text
    focus = default_icons().select_focus.text
    help_input = default_prompt_config().help_input
    expected = "\n".join(
        [
            f"{q} Pick your word:  [Use arrows to move, type to filter, {help_input} for more help]",
            "  foo",
            "  bar",
            f"{focus} baz",
            "  buz\n",
        ]
    )
    assert expected in text


def test_render_help_shown():
    text = _render_prompt(
        _word_prompt("This is helpful"),
        SelectTemplateData(
            selected_index=2, show_help=True, page_entries=option_answer_list(WORDS)
        ),
    )
    icons = default_icons()
    expected = "\n".join(
        [
            f"{icons.help.text} This is helpful",
            f"{icons.question.text} Pick your word:  [Use arrows to move, type to filter]",
            "  foo",
            "  bar",
            f"{icons.select_focus.text} baz",
            "  buz\n",
        ]
    )
    assert expected in text


def test_render_option_with_description():
    data = SelectTemplateData(
        selected_index=0,
        config=default_prompt_config(),
        description=lambda value, index: f"{value}#{index}",
    )
    assert render_select_option(data.iterate_option(0, OptionAnswer("one", 0))) == "> one - one#0\n"
    assert render_select_option(data.iterate_option(1, OptionAnswer("two", 1))) == "  two - two#1\n"


def test_get_description_without_function():
    data = SelectTemplateData(config=default_prompt_config())
    assert data.get_description(OptionAnswer("one", 0)) == ""


def test_iterate_option_leaves_original_untouched():
    data = SelectTemplateData(selected_index=1, config=default_prompt_config())
    copy = data.iterate_option(3, OptionAnswer("x", 7))
    assert (copy.current_index, copy.current_opt) == (3, OptionAnswer("x", 7))
    assert (data.current_index, data.current_opt) == (0, None)
    assert copy.selected_index == 1


# Cursor offsets


def _offset(opts, ix, width):
    data = SelectTemplateData(selected_index=ix, config=default_prompt_config())
    return compute_cursor_offset(
        lambda i, o: strip_ansi(render_select_option(data.iterate_option(i, o))),
        opts,
        ix,
        width,
    )


@pytest.mark.parametrize(
    "opts, ix, width, want",
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
            ["wide one wide one wide one", "two", "three", "01234567890123456", "five", "six"],
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
def test_compute_cursor_offset_select(opts, ix, width, want):
    assert _offset(option_answer_list(opts), ix, width) == want


# Prompting


@pytest.mark.parametrize(
    "select, keys, expected",
    [
        (
            Select(message="Choose a color:", options=_colors()),
            KEY_ARROW_DOWN + "\n",
            OptionAnswer(index=1, value="blue"),
        ),
        (
            Select(message="Choose a color:", options=_colors()),
            KEY_ARROW_DOWN + KEY_TAB + "\n",
            OptionAnswer(index=2, value="green"),
        ),
        (
            Select(message="Choose a color:", options=_colors(), default="green"),
            "\n",
            OptionAnswer(index=2, value="green"),
        ),
        (
            Select(message="Choose a color:", options=_colors(), default=2),
            "\n",
            OptionAnswer(index=2, value="green"),
        ),
        (
            Select(message="Choose a color:", options=_colors(), default="blue"),
            KEY_ARROW_UP + "\n",
            OptionAnswer(index=0, value="red"),
        ),
        (
            Select(message="Choose a color:", options=_colors(), page_size=1),
            KEY_ARROW_UP + "\n",
            OptionAnswer(index=2, value="green"),
        ),
        (
            Select(message="Choose a color:", options=_colors(), vim_mode=True),
            "j\n",
            OptionAnswer(index=1, value="blue"),
        ),
        (
            Select(message="Choose a color:", options=_colors()),
            "re" + KEY_ARROW_DOWN + "\n",
            OptionAnswer(index=2, value="green"),
        ),
        (
            Select(message="Choose a color:", options=_colors()),
            "RE" + KEY_ARROW_DOWN + "\n",
            OptionAnswer(index=2, value="green"),
        ),
        (
            Select(message="Choose a color:", options=_colors(), default="blue"),
            "red\n",
            OptionAnswer(index=0, value="red"),
        ),
        (
            Select(
                message="Choose a color:",
                options=_colors(),
                filter=lambda text, value, index: len(value) >= 5,
            ),
            "re\n",
            OptionAnswer(index=2, value="green"),
        ),
        (
            Select(message="Choose a color:", options=_colors()),
            "z\n" + KEY_ENTER + "\n" + KEY_BACKSPACE + "\n" + KEY_ENTER + "\n",
            OptionAnswer(index=0, value="red"),
        ),
        (
            Select(message="Choose a color:", options=["red", "blue", "black"]),
            "blu" + KEY_DELETE + KEY_ARROW_DOWN + "\n",
            OptionAnswer(index=2, value="black"),
        ),
        (
            Select(message="今天中午吃什么？", options=["青椒牛肉丝", "小炒肉", "小煎鸡"]),
            "小炒" + KEY_BACKSPACE + KEY_ARROW_DOWN + "\n",
            OptionAnswer(index=2, value="小煎鸡"),
        ),
    ],
)
def test_select_prompt(select, keys, expected):
    answer, output = _run(select, keys)
    assert answer == expected
    assert select.message in output


def test_prompt_for_help():
    select = Select(message="Choose a color:", options=_colors(), help="My favourite color is red")
    answer, output = _run(select, "?\n\n")
    assert "My favourite color is red" in output
    assert answer == OptionAnswer(index=0, value="red")


def test_prompt_without_options_fails():
    with pytest.raises(ValueError, match="please provide options to select from"):
        _run(Select(message="Choose one:"), "\n")


def test_prompt_with_bad_default_type_fails():
    with pytest.raises(TypeError, match="default value of select must be an int or string"):
        _run(Select(message="Choose:", options=["a"], default=1.5), "\n")


def test_prompt_interrupt():
    with pytest.raises(InterruptError):
        _run(Select(message="Choose:", options=_colors()), "\x03")


def test_prompt_end_transmission_uses_first_option():
    answer, _ = _run(Select(message="Choose:", options=_colors()), "\x04")
    assert answer == OptionAnswer(index=0, value="red")


def test_prompt_end_of_input_raises():
    with pytest.raises(EOFError):
        _run(Select(message="Choose:", options=_colors()), KEY_ARROW_DOWN)


def test_prompt_clears_filter_afterwards():
    select = Select(message="Choose:", options=_colors())
    answer, _ = _run(select, "gr\n")
    assert answer == OptionAnswer(index=2, value="green")
    assert select.filter_message == ""
    assert len(select.filter_options(default_prompt_config())) == 3


# Key handling


def test_on_change_escape_toggles_vim_mode():
    select = Select(message="Choose:", options=_colors())
    _attach(select)
    config = default_prompt_config()
    assert select.on_change(KEY_ESCAPE, config) is False
    assert select.vim_mode is True
    select.on_change(KEY_ESCAPE, config)
    assert select.vim_mode is False


def test_on_change_typing_sets_filter_message():
    select = Select(message="Choose:", options=_colors(), vim_mode=True)
    out = _attach(select)
    config = default_prompt_config()
    select.on_change("r", config)
    select.on_change("e", config)
    assert select.filter_message == " re"
    assert select.vim_mode is False
    assert [opt.value for opt in select.filter_options(config)] == ["red", "green"]
    assert "Choose: re" in out.getvalue()


def test_on_change_delete_word_clears_filter():
    select = Select(message="Choose:", options=_colors())
    _attach(select)
    config = default_prompt_config()
    select.on_change("b", config)
    select.on_change("\x17", config)
    assert select.filter_message == ""
    assert len(select.filter_options(config)) == 3


def test_on_change_enter_with_no_matches_keeps_prompting():
    select = Select(message="Choose:", options=_colors())
    _attach(select)
    config = default_prompt_config()
    select.on_change("z", config)
    assert select.filter_options(config) == []
    assert select.on_change(KEY_ENTER, config) is False


def test_cleanup_shows_answer():
    select = Select(message="Choose a color:", options=_colors())
    out = _attach(select)
    select.cleanup(default_prompt_config(), OptionAnswer(value="blue", index=1))
    assert f"{default_icons().question.text} Choose a color: blue\n" in out.getvalue()