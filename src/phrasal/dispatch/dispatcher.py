"""Dispatchers: resolve a ``check`` call against a registry and settle it."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NoReturn

from phrasal._internal.formatting import inspect_args
from phrasal.assertions._base import (
    AssertionFailure,
    Broken,
    Capability,
    Failed,
    Outcome,
    Passed,
)
from phrasal.assertions.assertion import (
    Assertion,
    AsyncAssertion,
    Match,
    SyncAssertion,
    create_assertion,
    create_async_assertion,
    validate_outcome,
)
from phrasal.config import get_settings
from phrasal.context import CheckRecord, collect_check_record
from phrasal.diff import format_failure_diff
from phrasal.dispatch.matching import (
    Conjunct,
    PhraseIndex,
    Plan,
    ValidatorConjunct,
    plan_call,
)
from phrasal.errors import (
    AssertionConfigurationError,
    AssertionFailedError,
    AssertionImplementationError,
    FailAssertionError,
    NegatedAssertionError,
    UnknownAssertionError,
)
from phrasal.validators import ValidationResult, Validator


if TYPE_CHECKING:
    from phrasal.dispatch.compose import CheckKit


logger = logging.getLogger(__name__)


def fail(reason: str | None = None) -> NoReturn:
    """Fail the current test unconditionally.

    Raises
    ------
    FailAssertionError
        Always.
    """
    raise FailAssertionError(reason)


def _render_failure(outcome: Failed, label: str) -> Outcome:
    """Render the diff of a failure before it is settled; a raising formatter breaks the check."""
    if isinstance(outcome.cause, AssertionFailedError):
        return outcome
    try:
        diff = format_failure_diff(outcome.failure)
    except Exception as err:
        return Broken(
            AssertionImplementationError(
                f"Assertion {label} failed, but rendering its diff raised "
                f"{type(err).__name__}: {err}",
                result=outcome.failure,
                cause=err,
            )
        )
    if diff is None or diff == outcome.failure.diff:
        return outcome
    return Failed(outcome.failure.model_copy(update={"diff": diff}), cause=outcome.cause)


@dataclass(frozen=True, slots=True)
class RegistrySnapshot:
    """Immutable pair of registries; order fixes match priority."""

    sync_assertions: tuple[SyncAssertion, ...] = ()
    async_assertions: tuple[AsyncAssertion, ...] = ()

    def extend(self, assertions: Iterable[Assertion]) -> RegistrySnapshot:
        """Return a snapshot with ``assertions`` appended after the existing ones.

        Raises
        ------
        AssertionConfigurationError
            If any item is not an assertion created by the factories.
        """
        new_sync: list[SyncAssertion] = []
        new_async: list[AsyncAssertion] = []
        for index, assertion in enumerate(assertions):
            if not isinstance(assertion, Assertion):
                raise AssertionConfigurationError(
                    f"extend_with() expects assertions from create_assertion() or "
                    f"create_async_assertion(), got {type(assertion).__name__} at position {index}",
                    index=index,
                    part=assertion,
                )
            if assertion.capability is Capability.ASYNC:
                new_async.append(assertion)
            else:
                new_sync.append(assertion)
        return RegistrySnapshot(
            sync_assertions=(*self.sync_assertions, *new_sync),
            async_assertions=(*self.async_assertions, *new_async),
        )


class Dispatcher(ABC):
    """Shared resolution and settlement for both dispatchers.

    Dispatchers are immutable once built: extending one returns a new
    :class:`~phrasal.dispatch.compose.CheckKit` over a new snapshot.
    """

    __slots__ = ("_snapshot", "_index")

    def __init__(self, snapshot: RegistrySnapshot) -> None:
        self._snapshot = snapshot
        self._index: PhraseIndex | None = None

    @property
    def snapshot(self) -> RegistrySnapshot:
        return self._snapshot

    @property
    @abstractmethod
    def assertions(self) -> tuple[Assertion, ...]:
        """Registrations this dispatcher matches against, in priority order."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} with {len(self.assertions)} assertions>"

    def _candidates(self, args: tuple[Any, ...]) -> Sequence[Assertion]:
        if not get_settings().phrase_index:
            return self.assertions
        if self._index is None:
            self._index = PhraseIndex(self.assertions)
        return self._index.candidates(args)

    def resolve(self, args: tuple[Any, ...]) -> Match | None:
        """First registration, in registry order, whose slots accept ``args``."""
        for assertion in self._candidates(args):
            found = assertion.match(args)
            if found is not None:
                logger.debug("Matched %r for %s", assertion, inspect_args(args))
                return found
        return None

    def plan(self, args: tuple[Any, ...]) -> Plan:
        plan = plan_call(args, self.resolve)
        if plan is None:
            logger.debug("No assertion matched %s", inspect_args(args))
            raise UnknownAssertionError(
                f"No assertion matched: {inspect_args(args)}", subject=args[0], args=args
            )
        return plan

    def _settle(self, conjunct: Conjunct, outcome: Outcome) -> None:
        """Apply negation to ``outcome`` and raise if the conjunct did not hold."""
        if isinstance(conjunct, ValidatorConjunct):
            assertion_id, signature, negated = "validator", conjunct.validator.name, False
            label = f"validator {conjunct.validator.name}"
        else:
            assertion = conjunct.match.assertion
            assertion_id, signature = assertion.id, assertion.signature
            negated, label = conjunct.match.negated, str(assertion)

        if isinstance(outcome, Failed):
            outcome = _render_failure(outcome, label)

        def record(passed: bool, message: str | None = None) -> None:
            collect_check_record(
                CheckRecord(
                    assertion_id=assertion_id,
                    signature=signature,
                    negated=negated,
                    passed=passed,
                    message=message,
                )
            )

        match outcome:
            case Broken(error=error):
                record(False, str(error))
                raise error
            case Passed() if negated:
                failure = AssertionFailure(
                    message=f"Expected assertion {label} to fail (due to negation), but it passed"
                )
                record(False, failure.message)
                logger.debug("Negated assertion %s unexpectedly passed", label)
                raise NegatedAssertionError(failure, assertion_id=assertion_id)
            case Passed():
                record(True)
            case Failed() if negated:
                logger.debug("Negated assertion %s failed as expected", label)
                record(True)
            case Failed(failure=failure, cause=cause):
                record(False, failure.message)
                if isinstance(cause, AssertionFailedError):
                    raise cause
                raise AssertionFailedError(failure, assertion_id=assertion_id) from cause

    def extend_with(self, assertions: Iterable[Assertion]) -> CheckKit:
        """Build a new kit whose registries are this one's followed by ``assertions``."""
        from phrasal.dispatch.compose import CheckKit

        return CheckKit.from_snapshot(self._snapshot.extend(assertions))

    fail = staticmethod(fail)


class SyncDispatcher(Dispatcher):
    """Synchronous ``check``.

    Example:
        >>> check(5, "to be greater than", 3)
        >>> check("x", "to be a string", "and", str.isalpha)
        >>> check(3, "not to be a string")
    """

    __slots__ = ()

    create_assertion = staticmethod(create_assertion)

    @property
    def assertions(self) -> tuple[SyncAssertion, ...]:
        return self._snapshot.sync_assertions

    def __call__(self, subject: Any, *rest: Any) -> None:
        args = (subject, *rest)
        for conjunct in self.plan(args):
            self._settle(conjunct, self._execute(conjunct))

    def _execute(self, conjunct: Conjunct) -> Outcome:
        if isinstance(conjunct, ValidatorConjunct):
            return validate_outcome(conjunct.validator, conjunct.subject)
        return conjunct.match.assertion.execute(conjunct.match)

    def it(self, *rest: Any) -> DeferredCheck:
        """Defer ``check(value, *rest)`` into a validator.

        Usable as a chained conjunct, as the parameter of ``"to satisfy"``,
        or as a validator part of another registration.
        """
        return DeferredCheck(self, rest)


class AsyncDispatcher(Dispatcher):
    """Asynchronous ``check_async``; awaits exactly one deferred value per conjunct."""

    __slots__ = ()

    create_async_assertion = staticmethod(create_async_assertion)

    @property
    def assertions(self) -> tuple[AsyncAssertion, ...]:
        return self._snapshot.async_assertions

    async def __call__(self, subject: Any, *rest: Any) -> None:
        args = (subject, *rest)
        for conjunct in self.plan(args):
            self._settle(conjunct, await self._execute(conjunct))

    async def _execute(self, conjunct: Conjunct) -> Outcome:
        if isinstance(conjunct, ValidatorConjunct):
            return validate_outcome(conjunct.validator, conjunct.subject)
        return await conjunct.match.assertion.execute(conjunct.match)


class DeferredCheck(Validator):
    """Validator that runs a synchronous check against the value it is given."""

    def __init__(self, dispatcher: SyncDispatcher, rest: tuple[Any, ...]) -> None:
        self.dispatcher = dispatcher
        self.rest = rest
        self.name = f"it{inspect_args(rest)}"

    def validate(self, value: Any) -> ValidationResult:
        try:
            self.dispatcher(value, *self.rest)
        except AssertionFailedError as err:
            return self._reject(err.message)
        return self._accept()
