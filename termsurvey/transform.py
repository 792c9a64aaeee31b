"""Transformers that turn a validated answer into another representation."""

from __future__ import annotations

import unicodedata
from typing import Any, Callable

from termsurvey.validate import is_zero

Transformer = Callable[[Any], Any]


def transform_string(func: Callable[[str], str]) -> Transformer:
    """Make a transformer that applies ``func`` to string answers.

    Empty or non-string answers give an empty string, which leaves the
    original answer untouched.
    """

    def transform(answer: Any) -> Any:
        if is_zero(answer) or not isinstance(answer, str):
            return ""
        return func(answer)

    return transform


def _is_separator(ch: str) -> bool:
    if ord(ch) <= 0x7F:
        return not (ch.isalnum() or ch == "_")
    category = unicodedata.category(ch)
    if category.startswith("L") or category == "Nd":
        return False
    return ch.isspace()


def _title_case(text: str) -> str:
    pieces = []
    prev_separator = True
    for ch in text:
        if prev_separator:
            titled = ch.title()
            pieces.append(titled if len(titled) == 1 else ch)
        else:
            pieces.append(ch)
        prev_separator = _is_separator(ch)
    return "".join(pieces)


def to_lower(answer: Any) -> Any:
    """Lower-case a string answer."""
    return transform_string(str.lower)(answer)


def title(answer: Any) -> Any:
    """Capitalise the first letter of every word of a string answer."""
    return transform_string(_title_case)(answer)


def compose_transformers(*transformers: Transformer) -> Transformer:
    """Apply transformers one after another."""

    def transform(answer: Any) -> Any:
        for transformer in transformers:
            answer = transformer(answer)
        return answer

    return transform