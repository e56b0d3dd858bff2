"""Assertion parts: the declarative description a registration is built from.

A parts sequence mixes phrase literals (``"to be even"``), phrase choices
(``("to be a", "to be an")``) and validators. Each raw part is classified
into one of the tagged variants below before slot compilation.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from phrasal._internal.formatting import inspect_value
from phrasal.errors import AssertionConfigurationError
from phrasal.validators import Validator, as_validator


NEGATION_PREFIX = "not "
CONJUNCTION = "and"


@dataclass(frozen=True, slots=True)
class PhraseLiteral:
    text: str


@dataclass(frozen=True, slots=True)
class PhraseChoice:
    options: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ValidatorPart:
    validator: Validator


@dataclass(frozen=True, slots=True)
class Conjunction:
    """The literal ``"and"`` joining two parameters, as in ``"to be between", x, "and", y``."""


Part = PhraseLiteral | PhraseChoice | ValidatorPart | Conjunction


def _check_phrase(text: str, index: int, part: Any) -> None:
    if not text:
        raise AssertionConfigurationError(
            f"Phrase at parts[{index}] must not be empty: {inspect_value(part)}",
            index=index,
            part=part,
        )
    if text.startswith(NEGATION_PREFIX):
        raise AssertionConfigurationError(
            f'Phrase at parts[{index}] must not start with "{NEGATION_PREFIX}"; '
            f"negation is derived automatically, so register the positive form: {inspect_value(part)}",
            index=index,
            part=part,
        )


def _is_phrase_choice(part: Any) -> bool:
    return isinstance(part, (tuple, list)) and bool(part) and all(isinstance(p, str) for p in part)


def classify_part(part: Any, index: int, parts: Sequence[Any]) -> Part:
    """Classify one raw part, raising on anything that is not a legal part."""
    if isinstance(part, str):
        if part == CONJUNCTION:
            following = parts[index + 1] if index + 1 < len(parts) else None
            if index == 0 or following is None or isinstance(following, str) or as_validator(following) is None:
                where = "nothing" if following is None else inspect_value(following)
                raise AssertionConfigurationError(
                    f'"{CONJUNCTION}" at parts[{index}] must sit between two parts and be '
                    f"followed by a validator, but was followed by {where}",
                    index=index,
                    part=part,
                )
            return Conjunction()
        _check_phrase(part, index, part)
        return PhraseLiteral(part)

    if isinstance(part, (tuple, list)):
        if not _is_phrase_choice(part):
            raise AssertionConfigurationError(
                f"Phrase choice at parts[{index}] must be a non-empty sequence of strings: "
                f"{inspect_value(part)}",
                index=index,
                part=part,
            )
        for option in part:
            _check_phrase(option, index, part)
        return PhraseChoice(tuple(part))

    checker = as_validator(part)
    if checker is None:
        raise AssertionConfigurationError(
            f"Expected a phrase, phrase choice or validator at parts[{index}] but received "
            f"{inspect_value(part)} ({type(part).__name__})",
            index=index,
            part=part,
        )
    return ValidatorPart(checker)


def classify_parts(parts: Sequence[Any]) -> tuple[Part, ...]:
    if isinstance(parts, (str, bytes)) or not isinstance(parts, Sequence):
        raise AssertionConfigurationError(
            f"Assertion parts must be a list or tuple, got {inspect_value(parts)}",
            part=parts,
        )
    if not parts:
        raise AssertionConfigurationError("At least one part is required for an assertion", part=parts)
    return tuple(classify_part(part, index, parts) for index, part in enumerate(parts))
