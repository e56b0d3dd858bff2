"""Call resolution: phrase index and ``"and"`` conjunction planning.

A call such as ``check(x, "to be a number", "and", positive)`` is split on
the bare ``"and"`` token into conjuncts, each applied to the original
subject. ``"and"`` is also a legal phrase inside a registration
(``"to be between", 1, "and", 10``), so every way of splitting is a
candidate *plan*; the planner settles on the plan with the most conjuncts
that all resolve, before any of them runs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import cache
from typing import Any, Generic, TypeVar

from phrasal.assertions.assertion import Assertion, Match
from phrasal.assertions.parts import CONJUNCTION, NEGATION_PREFIX
from phrasal.validators import Validator, as_validator


logger = logging.getLogger(__name__)

A = TypeVar("A", bound=Assertion)


class PhraseIndex(Generic[A]):
    """Narrow the registrations worth trying for a call by its first phrase.

    Registrations whose second slot is a phrase slot are indexed under each
    of its phrases; every other registration is a candidate for any call.
    Candidate tuples keep registry order, so the index never changes which
    registration wins.
    """

    def __init__(self, assertions: Sequence[A]) -> None:
        self._unindexed: tuple[A, ...] = tuple(a for a in assertions if a.index_phrases is None)
        phrases = {phrase for a in assertions for phrase in a.index_phrases or ()}
        self._by_phrase: dict[str, tuple[A, ...]] = {
            phrase: tuple(
                a for a in assertions if a.index_phrases is None or phrase in a.index_phrases
            )
            for phrase in phrases
        }

    def __len__(self) -> int:
        return len(self._by_phrase)

    def candidates(self, args: Sequence[Any]) -> tuple[A, ...]:
        if len(args) < 2 or not isinstance(args[1], str):
            return self._unindexed
        phrase = args[1]
        found = self._by_phrase.get(phrase)
        if found is None and phrase.startswith(NEGATION_PREFIX):
            found = self._by_phrase.get(phrase[len(NEGATION_PREFIX) :])
        return self._unindexed if found is None else found


@dataclass(frozen=True, slots=True)
class AssertionConjunct:
    """A conjunct resolved to a registration."""

    match: Match


@dataclass(frozen=True, slots=True)
class ValidatorConjunct:
    """A conjunct that is a lone validator applied to the subject."""

    validator: Validator
    subject: Any


Conjunct = AssertionConjunct | ValidatorConjunct
Plan = tuple[Conjunct, ...]


def conjunction_positions(args: Sequence[Any]) -> tuple[int, ...]:
    """Indices of bare ``"and"`` tokens after the subject."""
    return tuple(
        index
        for index, arg in enumerate(args)
        if index > 0 and isinstance(arg, str) and arg == CONJUNCTION
    )


def plan_call(args: Sequence[Any], resolve: Callable[[tuple[Any, ...]], Match | None]) -> Plan | None:
    """Resolve ``args`` into a plan whose conjuncts all resolve.

    Among the ways of cutting ``args`` at its ``"and"`` tokens, the one with
    the most conjuncts wins and ties go to the earliest cuts, so the unsplit
    call is the last resort. Each segment is resolved at most once.

    ``resolve`` maps a full argument tuple (subject first) to a
    :class:`Match`, or ``None`` if no registration accepts it.
    """
    args = tuple(args)
    subject = args[0]
    ends = (*conjunction_positions(args), len(args))

    @cache
    def segment(start: int, end: int) -> Conjunct | None:
        if start == 0:
            match = resolve(args[:end])
            return None if match is None else AssertionConjunct(match)
        if end == start:
            return None
        return _resolve_conjunct(subject, args[start:end], resolve)

    @cache
    def best(start: int) -> Plan | None:
        found: Plan | None = None
        for end in ends:
            if end < start:
                continue
            head = segment(start, end)
            if head is None:
                continue
            rest = () if end == len(args) else best(end + 1)
            if rest is not None and (found is None or len(rest) + 1 > len(found)):
                found = (head, *rest)
        return found

    plan = best(0)
    if plan is not None and len(plan) > 1:
        logger.debug("Resolved call into %d conjuncts", len(plan))
    return plan


def _resolve_conjunct(
    subject: Any,
    segment: tuple[Any, ...],
    resolve: Callable[[tuple[Any, ...]], Match | None],
) -> Conjunct | None:
    if len(segment) == 1 and not isinstance(segment[0], str):
        checker = as_validator(segment[0])
        if checker is not None:
            return ValidatorConjunct(checker, subject)
    match = resolve((subject, *segment))
    return None if match is None else AssertionConjunct(match)
