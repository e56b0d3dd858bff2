"""Asynchronous built-in assertions.

Subjects are awaitables, or zero-argument callables returning one, so
``check_async(fetch, "to resolve")`` and ``check_async(fetch(), "to resolve")``
are equivalent.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from phrasal._internal.formatting import inspect_value
from phrasal.assertions._base import AssertionFailure
from phrasal.assertions.assertion import AsyncAssertion, create_async_assertion
from phrasal.assertions.builtin import EXCEPTION_TYPE
from phrasal.validators import ANY, satisfies


DEFERRED = satisfies(lambda value: inspect.isawaitable(value) or callable(value), name="awaitable")


@dataclass(frozen=True, slots=True)
class Settled:
    value: Any = None
    error: BaseException | None = None

    @property
    def rejected(self) -> bool:
        return self.error is not None


async def settle(subject: Awaitable[Any] | Callable[[], Awaitable[Any]]) -> Settled:
    """Await ``subject`` and capture how it settled."""
    try:
        deferred = subject() if callable(subject) and not inspect.isawaitable(subject) else subject
        return Settled(value=await deferred)
    except Exception as err:
        return Settled(error=err)


async def _resolves(subject: Any) -> AssertionFailure | bool:
    settled = await settle(subject)
    if not settled.rejected:
        return True
    return AssertionFailure(
        actual=settled.error,
        message=f"Expected {inspect_value(subject)} to resolve, but it rejected with {settled.error!r}",
    )


async def _rejects(subject: Any) -> AssertionFailure | bool:
    settled = await settle(subject)
    if settled.rejected:
        return True
    return AssertionFailure(
        actual=settled.value,
        message=f"Expected {inspect_value(subject)} to reject, but it resolved with "
        f"{inspect_value(settled.value)}",
    )


async def _rejects_with(subject: Any, expected: type[BaseException]) -> AssertionFailure | bool:
    settled = await settle(subject)
    if isinstance(settled.error, expected):
        return True
    actual = type(settled.error).__name__ if settled.rejected else "resolution"
    return AssertionFailure(
        actual=actual,
        expected=expected.__name__,
        message=f"Expected {inspect_value(subject)} to reject with {expected.__name__}, got {actual}",
    )


async def _resolves_with(subject: Any, expected: Any) -> AssertionFailure | bool:
    settled = await settle(subject)
    if settled.rejected:
        return AssertionFailure(
            actual=settled.error,
            expected=expected,
            message=f"Expected {inspect_value(subject)} to resolve with {inspect_value(expected)}, "
            f"but it rejected with {settled.error!r}",
        )
    if settled.value == expected:
        return True
    return AssertionFailure(
        actual=settled.value,
        expected=expected,
        message=f"Expected {inspect_value(subject)} to resolve with {inspect_value(expected)}",
    )


ASYNC_ASSERTIONS: tuple[AsyncAssertion, ...] = (
    create_async_assertion(
        [DEFERRED, ("to resolve", "to be fulfilled")], _resolves, {"category": "async"}
    ),
    create_async_assertion(
        [DEFERRED, ("to reject", "to be rejected")], _rejects, {"category": "async"}
    ),
    create_async_assertion(
        [DEFERRED, ("to reject with", "to be rejected with"), EXCEPTION_TYPE],
        _rejects_with,
        {"category": "async"},
    ),
    create_async_assertion(
        [DEFERRED, ("to resolve with", "to resolve to", "to be fulfilled with"), ANY],
        _resolves_with,
        {"category": "async"},
    ),
)
