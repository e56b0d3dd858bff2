"""Synchronous built-in assertions.

Order matters: the dispatcher takes the first registration whose slots
match a call, so narrower shapes are listed before broader ones that
could accept the same arguments.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from phrasal._internal.formatting import inspect_value
from phrasal.assertions._base import AssertionFailure
from phrasal.assertions.assertion import SyncAssertion, create_assertion
from phrasal.validators import ANY, as_validator, instance_of, is_validator_like, satisfies, schema


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_exception_type(value: Any) -> bool:
    return isinstance(value, type) and issubclass(value, BaseException)


NUMBER = satisfies(_is_number, name="number")
SIZED = satisfies(lambda value: hasattr(value, "__len__"), name="sized")
CONTAINER = satisfies(
    lambda value: hasattr(value, "__contains__") or hasattr(value, "__iter__"), name="container"
)
CALLABLE = satisfies(callable, name="callable")
PATTERN = instance_of(str, re.Pattern, name="pattern")
EXCEPTION_TYPE = satisfies(_is_exception_type, name="exception type")
TYPE = instance_of(type, name="type")
VALIDATOR_LIKE = satisfies(is_validator_like, name="validator")


# Types

_types: list[SyncAssertion] = [
    create_assertion(["to be a string"], schema(str), {"category": "types"}),
    create_assertion(["to be a number"], NUMBER, {"category": "types"}),
    create_assertion([("to be an integer", "to be an int")], schema(int), {"category": "types"}),
    create_assertion([("to be a boolean", "to be a bool")], schema(bool), {"category": "types"}),
    create_assertion(
        ["to be None"], satisfies(lambda value: value is None, name="None"), {"category": "types"}
    ),
    create_assertion(["to be callable"], CALLABLE, {"category": "types"}),
    create_assertion(["to be a list"], schema(list), {"category": "types"}),
    create_assertion(["to be a dict"], schema(dict), {"category": "types"}),
]


def _instance_of(subject: Any, cls: type) -> AssertionFailure | bool:
    if isinstance(subject, cls):
        return True
    return AssertionFailure(
        actual=type(subject).__name__,
        expected=cls.__name__,
        message=f"Expected {inspect_value(subject)} to be an instance of {cls.__name__}",
    )


_types.append(
    create_assertion(
        [("to be an instance of", "to be a", "to be an"), TYPE],
        _instance_of,
        {"category": "types", "anchor": "instance-of"},
    )
)


# Equality and truthiness


def _identical(subject: Any, expected: Any) -> AssertionFailure | bool:
    if subject is expected:
        return True
    return AssertionFailure(
        actual=subject,
        expected=expected,
        message=f"Expected {inspect_value(subject)} to be {inspect_value(expected)}",
    )


def _equal(subject: Any, expected: Any) -> AssertionFailure | bool:
    """Compare with ``==``; the failure carries both sides so a diff can be rendered."""
    if subject == expected:
        return True
    return AssertionFailure(
        actual=subject,
        expected=expected,
        message=f"Expected {inspect_value(subject)} to equal {inspect_value(expected)}",
    )


_equality: list[SyncAssertion] = [
    create_assertion([("to be", "to be identical to"), ANY], _identical, {"category": "equality"}),
    create_assertion([("to equal", "to be equal to"), ANY], _equal, {"category": "equality"}),
    create_assertion(
        [("to be truthy", "to be ok")], lambda subject: bool(subject), {"category": "equality"}
    ),
    create_assertion(["to be falsy"], lambda subject: not subject, {"category": "equality"}),
]


# Numeric


def _compare(
    symbol: str, op: Callable[[Any, Any], bool]
) -> Callable[[Any, Any], AssertionFailure | bool]:
    def compare(subject: Any, other: Any) -> AssertionFailure | bool:
        if op(subject, other):
            return True
        return AssertionFailure(
            actual=subject,
            expected=f"{symbol} {other!r}",
            message=f"Expected {inspect_value(subject)} to be {symbol} {inspect_value(other)}",
        )

    compare.__name__ = f"compare_{symbol}"
    return compare


def _between(subject: Any, low: Any, high: Any) -> AssertionFailure | bool:
    if low <= subject <= high:
        return True
    return AssertionFailure(
        actual=subject,
        expected=f"between {low!r} and {high!r}",
        message=f"Expected {inspect_value(subject)} to be between {low!r} and {high!r}",
    )


_numeric: list[SyncAssertion] = [
    create_assertion(
        [NUMBER, ("to be greater than", "to be above"), NUMBER],
        _compare(">", lambda a, b: a > b),
        {"category": "numeric"},
    ),
    create_assertion(
        [NUMBER, ("to be less than", "to be below"), NUMBER],
        _compare("<", lambda a, b: a < b),
        {"category": "numeric"},
    ),
    create_assertion(
        [NUMBER, ("to be at least", "to be greater than or equal to"), NUMBER],
        _compare(">=", lambda a, b: a >= b),
        {"category": "numeric"},
    ),
    create_assertion(
        [NUMBER, ("to be at most", "to be less than or equal to"), NUMBER],
        _compare("<=", lambda a, b: a <= b),
        {"category": "numeric"},
    ),
    create_assertion(
        [NUMBER, "to be between", NUMBER, "and", NUMBER],
        _between,
        {"category": "numeric", "description": "Inclusive range check"},
    ),
]


# Strings


def _matches(subject: str, pattern: str | re.Pattern) -> AssertionFailure | bool:
    if re.search(pattern, subject):
        return True
    source = pattern.pattern if isinstance(pattern, re.Pattern) else pattern
    return AssertionFailure(
        actual=subject,
        message=f"Expected {inspect_value(subject)} to match /{source}/",
    )


_strings: list[SyncAssertion] = [
    create_assertion([str, "to match", PATTERN], _matches, {"category": "strings"}),
    create_assertion(
        [str, "to start with", str],
        lambda subject, prefix: subject.startswith(prefix),
        {"category": "strings"},
    ),
    create_assertion(
        [str, "to end with", str],
        lambda subject, suffix: subject.endswith(suffix),
        {"category": "strings"},
    ),
]


# Collections


def _has_length(subject: Any, expected: int) -> AssertionFailure | bool:
    actual = len(subject)
    if actual == expected:
        return True
    return AssertionFailure(
        actual=actual,
        expected=expected,
        message=f"Expected {inspect_value(subject)} to have length {expected}, got {actual}",
    )


def _contains(subject: Any, item: Any) -> AssertionFailure | bool:
    if isinstance(subject, str) and not isinstance(item, str):
        found = False
    else:
        found = item in subject
    if found:
        return True
    return AssertionFailure(
        actual=subject,
        message=f"Expected {inspect_value(subject)} to contain {inspect_value(item)}",
    )


_collections: list[SyncAssertion] = [
    create_assertion([SIZED, "to have length", int], _has_length, {"category": "collections"}),
    create_assertion(
        [SIZED, "to be empty"], lambda subject: len(subject) == 0, {"category": "collections"}
    ),
    create_assertion(
        [CONTAINER, ("to contain", "to include"), ANY], _contains, {"category": "collections"}
    ),
]


# Callables


def _capture(fn: Callable[[], Any]) -> BaseException | None:
    try:
        fn()
    except Exception as err:
        return err
    return None


def _raises(fn: Callable[[], Any]) -> AssertionFailure | bool:
    if _capture(fn) is not None:
        return True
    return AssertionFailure(message=f"Expected {inspect_value(fn)} to raise, but it returned normally")


def _raises_type(fn: Callable[[], Any], expected: type[BaseException]) -> AssertionFailure | bool:
    """Call ``fn`` and require an exception of type ``expected``."""
    err = _capture(fn)
    if isinstance(err, expected):
        return True
    actual = "nothing" if err is None else type(err).__name__
    return AssertionFailure(
        actual=actual,
        expected=expected.__name__,
        message=f"Expected {inspect_value(fn)} to raise {expected.__name__}, but it raised {actual}",
    )


def _raises_message(fn: Callable[[], Any], fragment: str) -> AssertionFailure | bool:
    err = _capture(fn)
    if err is not None and fragment in str(err):
        return True
    actual = "nothing" if err is None else str(err)
    return AssertionFailure(
        actual=actual,
        expected=fragment,
        message=f"Expected {inspect_value(fn)} to raise an error mentioning {fragment!r}",
    )


_callables: list[SyncAssertion] = [
    create_assertion([CALLABLE, ("to raise", "to throw")], _raises, {"category": "callables"}),
    create_assertion(
        [CALLABLE, ("to raise", "to throw"), EXCEPTION_TYPE],
        _raises_type,
        {"category": "callables"},
    ),
    create_assertion(
        [CALLABLE, ("to raise", "to throw"), str], _raises_message, {"category": "callables"}
    ),
]


# Delegation

_delegation: list[SyncAssertion] = [
    create_assertion(
        ["to satisfy", VALIDATOR_LIKE],
        lambda subject, check: as_validator(check),
        {"category": "delegation", "description": "Validate the subject with any validator"},
    ),
]


SYNC_ASSERTIONS: tuple[SyncAssertion, ...] = (
    *_types,
    *_equality,
    *_numeric,
    *_strings,
    *_collections,
    *_callables,
    *_delegation,
)
