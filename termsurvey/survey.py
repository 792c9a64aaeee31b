"""Asking a series of questions and collecting the validated answers."""

from __future__ import annotations

import dataclasses
from collections.abc import MutableMapping, MutableSequence
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from termsurvey.config import AskOptions, OptionAnswer, PromptConfig, default_ask_options

Validator = Callable[[Any], None]
Transformer = Callable[[Any], Any]
AskOpt = Callable[[AskOptions], None]


@dataclass
class Question:
    """One question: where its answer goes, the prompt, and optional checks.

    ``prompt`` must provide ``prompt(config)``, ``cleanup(config, answer)`` and
    ``error(config, exc)``; it may also provide ``prompt_again(config, invalid,
    exc)`` and ``with_stdio(stdio)``.
    """

    name: str = ""
    prompt: Any = None
    validate: Optional[Validator] = None
    transform: Optional[Transformer] = None


def _field_names(response: Any) -> Iterable[str]:
    if dataclasses.is_dataclass(response) and not isinstance(response, type):
        return [f.name for f in dataclasses.fields(response)]
    try:
        return list(vars(response))
    except TypeError:
        return []


def _find_field(response: Any, name: str) -> str:
    wanted = name.replace("-", "_").lower()
    for candidate in _field_names(response):
        if candidate.lower() == wanted:
            return candidate
    raise ValueError(f"could not find field matching {name!r}")


def _convert_for(current: Any, value: Any) -> Any:
    if isinstance(value, OptionAnswer):
        if isinstance(current, str):
            return value.value
        if isinstance(current, int) and not isinstance(current, bool):
            return value.index
    return value


def write_answer(response: Any, name: str, value: Any) -> None:
    """Store ``value`` in ``response`` under ``name``.

    Mappings get the value under the key ``name``. With an empty name a list
    receives the answer as its contents. Other objects get the attribute whose
    name matches ``name`` ignoring case (dashes match underscores); an option
    answer stored where a string or an integer was is stored as its text or
    its index.
    """
    if isinstance(response, MutableMapping):
        response[name] = value
        return
    if not name and isinstance(response, MutableSequence):
        response[:] = list(value) if isinstance(value, (list, tuple)) else [value]
        return
    if not name:
        raise TypeError("an answer without a name needs a mapping or a list to go into")
    attribute = _find_field(response, name)
    setattr(response, attribute, _convert_for(getattr(response, attribute), value))


def _build_options(opts: Iterable[Optional[AskOpt]]) -> AskOptions:
    options = default_ask_options()
    for opt in opts:
        if opt is None:
            continue
        opt(options)
    return options


def _validate(question: Question, validators: List[Validator], value: Any) -> Optional[Exception]:
    checks = ([question.validate] if question.validate is not None else []) + validators
    for check in checks:
        try:
            check(value)
        except ValueError as exc:
            return exc
    return None


def _ask_question(question: Question, options: AskOptions) -> Any:
    prompt = question.prompt
    config: PromptConfig = options.prompt_config
    with_stdio = getattr(prompt, "with_stdio", None)
    if callable(with_stdio):
        with_stdio(options.stdio)

    answer: Any = None
    invalid: Optional[Exception] = None
    while True:
        if invalid is not None:
            prompt.error(config, invalid)
        prompt_again = getattr(prompt, "prompt_again", None)
        if invalid is not None and callable(prompt_again):
            answer = prompt_again(config, answer, invalid)
        else:
            answer = prompt.prompt(config)
        invalid = _validate(question, options.validators, answer)
        if invalid is None:
            break

    if question.transform is not None:
        transformed = question.transform(answer)
        if transformed is not None:
            answer = transformed

    prompt.cleanup(config, answer)
    return answer


def ask(questions: Iterable[Question], response: Any, *opts: Optional[AskOpt]) -> Any:
    """Ask every question in turn, re-asking until its answer validates.

    Answers are written into ``response`` (see ``write_answer``), which is
    returned.
    """
    options = _build_options(opts)
    if response is None:
        raise ValueError("cannot call ask() with no place to record the answers")

    for question in questions:
        answer = _ask_question(question, options)
        write_answer(response, question.name, answer)
    return response


def ask_one(prompt: Any, response: Any, *opts: Optional[AskOpt]) -> Any:
    """Ask a single prompt, store the answer in ``response`` and return it."""
    options = _build_options(opts)
    if response is None:
        raise ValueError("cannot call ask() with no place to record the answers")
    answer = _ask_question(Question(prompt=prompt), options)
    write_answer(response, "", answer)
    return answer