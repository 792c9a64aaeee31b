# termsurvey

Interactive prompts for terminal programs. Ask the user a series of
questions, let them pick from a filterable list with the arrow keys,
validate the answers and transform them before they are stored.

It needs an ANSI terminal; switching the terminal into key-at-a-time
mode uses `termios`, so it works on POSIX systems.

## Features

- `termsurvey.select.Select`: arrow keys (or `j`/`k` in vim mode) to move,
  type to filter the list, Enter to choose; long lists are paged.
- `termsurvey.validate`: `required`, `min_length`, `max_length`,
  `min_items`, `max_items`, and `compose_validators` to chain them.
- `termsurvey.transform`: `to_lower`, `title`, `transform_string` to wrap
  any `str -> str` function, and `compose_transformers` to chain them.
- `termsurvey.survey.ask` re-asks a question until its answer passes
  validation, showing the user why the last reply was rejected.
- `termsurvey.config`: ask options such as page size, help key, icons,
  filter function and custom streams.

## Asking a set of questions

```python
from termsurvey.config import with_page_size
from termsurvey.select import Select
from termsurvey.survey import Question, ask
from termsurvey.validate import required

questions = [
    Question(
        name="color",
        prompt=Select(message="Choose a color:", options=["red", "blue", "green"]),
        validate=required,
    ),
]

answers = {}
ask(questions, answers, with_page_size(5))
print(answers["color"].value, answers["color"].index)
```

A `Select` answer is an `OptionAnswer` holding the chosen `value` and its
`index` in the option list. `ask` writes each answer into the response
with `write_answer`:

- a mapping gets the answer under the question's name;
- any other object gets the attribute whose name matches the question's
  name, ignoring case, with `-` matching `_`. If that attribute held a
  string, an `OptionAnswer` is stored as its text; if it held an integer,
  as its index.

A `Question` may also carry a `transform`; a transformer that returns
`None` leaves the answer unchanged.

## Asking one question

```python
from termsurvey.select import Select
from termsurvey.survey import ask_one

choice = ask_one(Select(message="Pick a size:", options=["small", "medium", "large"]), [])
print(choice.value)
```

`ask_one` returns the answer. A list passed as the response has its
contents replaced by the answer; a mapping gets it under the key `""`.

## Validation

```python
from termsurvey.validate import compose_validators, max_length, required

check = compose_validators(required, max_length(10))
```

A validator raises `ValidationError` (a `ValueError`) when a value is
rejected. `ask` shows the message as
`X Sorry, your reply was invalid: <message>` and runs the prompt again.
Validators added with `with_validator(...)` run on every answer, after
the question's own validator. `required` accepts `False`.

## Select keys

| Key                 | Action                              |
|---------------------|-------------------------------------|
| Up / Down, Tab      | move the selection (wraps around)   |
| `j` / `k`           | move, when vim mode is on           |
| Esc                 | toggle vim mode                     |
| printable keys      | add to the filter                   |
| Backspace           | remove the last filter character    |
| Ctrl+W / Ctrl+X     | clear the filter                    |
| `?`                 | show the help text, if there is one |
| Enter               | choose the highlighted option       |
| Ctrl+D              | stop, keeping the current choice    |
| Ctrl+C              | abort with `InterruptError`         |

`Select.default` may be an option's text or its index. When the user
confirms without moving, the default is the answer.

## Options

`default_ask_options()` uses the process's standard streams, a page size
of 7, `?` as the help key and a case-insensitive substring filter. These
functions return options to pass to `ask` or `ask_one`:

`with_stdio`, `with_filter`, `with_page_size`, `with_help_input`,
`with_icons`, `with_validator`, `with_keep_filter`, `with_show_cursor`,
`with_remove_select_all`, `with_remove_select_none`.

Colour output can be switched off with
`termsurvey.renderer.set_color_enabled(False)`.

## Lower-level pieces

- `termsurvey.renderer.Renderer` draws prompt text and erases the previous
  drawing on redraw, counting lines that wrap at the terminal width.
- `termsurvey.terminal.cursor.Cursor` moves and queries the cursor with
  ANSI sequences.
- `termsurvey.terminal.runereader.RuneReader` reads single keys (turning
  arrow, Home, End and Delete sequences into key codes) and edited lines
  with `read_line`, optionally masked.

## What is not included

`Select` is the only prompt. There are no text-input, password,
yes/no, multi-select or editor prompts, so `with_keep_filter`,
`with_show_cursor`, `with_remove_select_all` and `with_remove_select_none`
only set fields on `PromptConfig` that no prompt here reads. There is no
command-line program.