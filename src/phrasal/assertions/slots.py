"""Slot compilation.

:func:`compile_slots` turns a parts sequence into the tuple of slots the
dispatcher matches call arguments against. A phrase in first position gets
an implicit subject slot ahead of it, so the slot tuple can be one longer
than the parts.

Compiled slot tuples are memoized by the identity of the parts object, and
phrase slots by phrase, so many registrations sharing ``"to be a"`` share
one :class:`PhraseSlot`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from phrasal._internal.cache import IdentityCache
from phrasal.assertions.parts import (
    CONJUNCTION,
    NEGATION_PREFIX,
    Conjunction,
    Part,
    PhraseChoice,
    PhraseLiteral,
    ValidatorPart,
    classify_parts,
)
from phrasal.validators import ANY, Validator


logger = logging.getLogger(__name__)


class PhraseMatch(Enum):
    PLAIN = "plain"
    NEGATED = "negated"


@dataclass(frozen=True, slots=True)
class SubjectSlot:
    validator: Validator
    implicit: bool = False

    def accepts(self, value: Any) -> bool:
        return self.validator.accepts(value)

    def describe(self) -> str:
        return "{" + self.validator.name + "}"


@dataclass(frozen=True, slots=True)
class PhraseSlot:
    phrases: tuple[str, ...]

    def match(self, value: Any) -> PhraseMatch | None:
        """Match a call argument against this phrase, noting a ``"not "`` prefix.

        The ``"and"`` of a registration never takes the prefix.
        """
        if not isinstance(value, str):
            return None
        if value in self.phrases:
            return PhraseMatch.PLAIN
        if self.is_conjunction:
            return None
        if value.startswith(NEGATION_PREFIX) and value[len(NEGATION_PREFIX):] in self.phrases:
            return PhraseMatch.NEGATED
        return None

    @property
    def is_conjunction(self) -> bool:
        return self.phrases == (CONJUNCTION,)

    def describe(self) -> str:
        return " / ".join(f"'{phrase}'" for phrase in self.phrases)


@dataclass(frozen=True, slots=True)
class ParameterSlot:
    validator: Validator

    def accepts(self, value: Any) -> bool:
        return self.validator.accepts(value)

    def describe(self) -> str:
        return "{" + self.validator.name + "}"


Slot = SubjectSlot | PhraseSlot | ParameterSlot

IMPLICIT_SUBJECT = SubjectSlot(ANY, implicit=True)

_slots_cache: IdentityCache[tuple[Slot, ...]] = IdentityCache()
_phrase_cache: dict[tuple[str, ...], PhraseSlot] = {}


def phrase_slot(phrases: tuple[str, ...]) -> PhraseSlot:
    """Return the shared :class:`PhraseSlot` for ``phrases``."""
    slot = _phrase_cache.get(phrases)
    if slot is None:
        slot = _phrase_cache.setdefault(phrases, PhraseSlot(phrases))
    return slot


def _compile(classified: tuple[Part, ...]) -> tuple[Slot, ...]:
    slots: list[Slot] = []
    for index, part in enumerate(classified):
        match part:
            case PhraseLiteral(text=text):
                if index == 0:
                    slots.append(IMPLICIT_SUBJECT)
                slots.append(phrase_slot((text,)))
            case PhraseChoice(options=options):
                if index == 0:
                    slots.append(IMPLICIT_SUBJECT)
                slots.append(phrase_slot(options))
            case Conjunction():
                slots.append(phrase_slot((CONJUNCTION,)))
            case ValidatorPart(validator=validator) if index == 0:
                slots.append(SubjectSlot(validator))
            case ValidatorPart(validator=validator):
                slots.append(ParameterSlot(validator))
    return tuple(slots)


def compile_slots(parts: Sequence[Any]) -> tuple[Slot, ...]:
    """Compile ``parts`` into slots.

    Raises
    ------
    AssertionConfigurationError
        If any part is malformed.
    """
    cached = _slots_cache.get(parts)
    if cached is not None:
        logger.debug("Slot cache hit for parts %r", parts)
        return cached
    slots = _compile(classify_parts(parts))
    _slots_cache.set(parts, slots)
    return slots


def render_signature(slots: tuple[Slot, ...]) -> str:
    return " ".join(slot.describe() for slot in slots)
