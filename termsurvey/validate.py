"""Validators that check answers before they are accepted."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sized
from typing import Any, Callable

from termsurvey.config import OptionAnswer

Validator = Callable[[Any], None]


class ValidationError(ValueError):
    """Raised by a validator when an answer is not acceptable."""


def is_zero(value: Any) -> bool:
    """Whether ``value`` is empty or the zero value of its type."""
    if value is None:
        return True
    if isinstance(value, bool):
        return value is False
    if isinstance(value, (int, float, complex)):
        return value == 0
    if isinstance(value, (str, bytes, bytearray, Mapping)) or isinstance(value, Sized):
        return len(value) == 0
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return all(is_zero(getattr(value, f.name)) for f in dataclasses.fields(value))
    return False


def required(value: Any) -> None:
    """Reject empty answers; False counts as an answer."""
    if is_zero(value) and not isinstance(value, bool):
        raise ValidationError("Value is required")


def _type_name(value: Any) -> str:
    return type(value).__name__


def max_length(length: int) -> Validator:
    """Reject strings longer than ``length`` characters."""

    def validate(value: Any) -> None:
        if not isinstance(value, str):
            raise ValidationError(
                f"cannot enforce length on response of type {_type_name(value)}"
            )
        if len(value) > length:
            raise ValidationError(f"value is too long. Max length is {length}")

    return validate


def min_length(length: int) -> Validator:
    """Reject strings shorter than ``length`` characters."""

    def validate(value: Any) -> None:
        if not isinstance(value, str):
            raise ValidationError(
                f"cannot enforce length on response of type {_type_name(value)}"
            )
        if len(value) < length:
            raise ValidationError(f"value is too short. Min length is {length}")

    return validate


def _is_answer_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, OptionAnswer) for item in value)


def max_items(number_items: int) -> Validator:
    """Reject answer lists with more than ``number_items`` entries."""

    def validate(value: Any) -> None:
        if not _is_answer_list(value):
            raise ValidationError(
                "cannot impose the length on something other than a list of answers"
            )
        if len(value) > number_items:
            raise ValidationError(f"value is too long. Max items is {number_items}")

    return validate


def min_items(number_items: int) -> Validator:
    """Reject answer lists with fewer than ``number_items`` entries."""

    def validate(value: Any) -> None:
        if not _is_answer_list(value):
            raise ValidationError(
                "cannot impose the length on something other than a list of answers"
            )
        if len(value) < number_items:
            raise ValidationError(f"value is too short. Min items is {number_items}")

    return validate


def compose_validators(*validators: Validator) -> Validator:
    """Run validators in order; the first failure is raised."""

    def validate(value: Any) -> None:
        for validator in validators:
            validator(value)

    return validate