"""Registrations: immutable bundles of slots and an implementation."""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar

from pydantic import TypeAdapter, ValidationError

from phrasal._internal.formatting import inspect_args, inspect_value
from phrasal.assertions._base import (
    AssertionFailure,
    AssertionMetadata,
    Broken,
    Capability,
    Failed,
    Outcome,
    Passed,
    ValidationRequest,
)
from phrasal.assertions.slots import PhraseMatch, PhraseSlot, Slot, compile_slots, render_signature
from phrasal.errors import (
    AssertionConfigurationError,
    AssertionFailedError,
    AssertionImplementationError,
    InvalidMetadataError,
    UnexpectedAsyncError,
)
from phrasal.validators import SchemaValidator, ValidationResult, Validator, as_validator


logger = logging.getLogger(__name__)

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def _slug(text: str) -> str:
    return _SLUG_STRIP.sub("-", text.lower()).strip("-")


def validation_outcome(result: ValidationResult, subject: Any) -> Outcome:
    if result.ok:
        return Passed()
    message = result.message or f"Expected {inspect_value(subject)} to satisfy {result.validator}"
    if result.issues and result.issues[0] not in message:
        message += f" ({'; '.join(result.issues)})"
    return Failed(AssertionFailure(actual=subject, message=message))


def validate_outcome(checker: Validator | TypeAdapter, subject: Any) -> Outcome:
    """Validate ``subject`` and express the result as an :class:`Outcome`."""
    if isinstance(checker, TypeAdapter):
        checker = SchemaValidator(adapter=checker)
    return validation_outcome(checker.validate(subject), subject)


@dataclass(frozen=True, slots=True)
class Match:
    """A registration that structurally accepted a call."""

    assertion: Assertion
    values: tuple[Any, ...]
    args: tuple[Any, ...]
    negated: bool = False


@dataclass(frozen=True, slots=True, eq=False)
class Assertion:
    """Base registration.

    Attributes
    ----------
    parts
        The parts the registration was declared with.
    slots
        Compiled slots, matched positionally against call arguments.
    impl
        A function, or a :class:`~phrasal.validators.Validator` applied to the subject.
    metadata
        Documentation metadata; never consulted during matching.
    id
        Readable identifier derived from the signature.
    """

    capability: ClassVar[Capability]

    parts: tuple[Any, ...]
    slots: tuple[Slot, ...]
    impl: Callable[..., Any] | Validator
    metadata: AssertionMetadata = field(default_factory=AssertionMetadata)
    id: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            object.__setattr__(
                self, "id", f"{_slug(self.signature)}-{len(self.slots)}s{len(self.parts)}p"
            )
        logger.debug("Created %s assertion %s", self.capability.value, self)

    @property
    def signature(self) -> str:
        return render_signature(self.slots)

    @property
    def phrases(self) -> tuple[str, ...]:
        return tuple(
            phrase
            for slot in self.slots
            if isinstance(slot, PhraseSlot) and not slot.is_conjunction
            for phrase in slot.phrases
        )

    @property
    def index_phrases(self) -> tuple[str, ...] | None:
        """Phrases that can appear right after the subject, or ``None`` if slot 1 is not a phrase."""
        if len(self.slots) > 1 and isinstance(self.slots[1], PhraseSlot):
            return self.slots[1].phrases
        return None

    def __str__(self) -> str:
        return self.metadata.name or self.signature

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"

    def match(self, args: tuple[Any, ...]) -> Match | None:
        """Match call arguments against the slots, or return ``None``.

        Phrase arguments may carry a ``"not "`` prefix, which marks the
        match as negated. Phrase tokens are dropped from the matched values.
        """
        if len(args) != len(self.slots):
            return None
        values: list[Any] = []
        negated = False
        for slot, arg in zip(self.slots, args):
            if isinstance(slot, PhraseSlot):
                found = slot.match(arg)
                if found is None:
                    return None
                negated = negated or found is PhraseMatch.NEGATED
            elif slot.accepts(arg):
                values.append(arg)
            else:
                return None
        return Match(self, tuple(values), tuple(args), negated)

    # Interpretation of implementation results

    def _default_failure(self, match: Match) -> AssertionFailure:
        return AssertionFailure(
            actual=match.values[0],
            message=f"Assertion {self} failed for arguments: {inspect_args(match.args)}",
        )

    def _validate(self, checker: Validator | TypeAdapter, subject: Any) -> Outcome:
        return validate_outcome(checker, subject)

    def _from_exception(self, err: Exception) -> Outcome:
        if isinstance(err, AssertionFailedError):
            return Failed(err.failure, cause=err)
        if isinstance(err, AssertionError):
            return Failed(AssertionFailure(message=str(err) or f"Assertion {self} failed"), cause=err)
        if isinstance(err, ValidationError):
            return Failed(AssertionFailure(message=str(err)), cause=err)
        if isinstance(err, AssertionImplementationError):
            return Broken(err)
        return Broken(
            AssertionImplementationError(
                f"Assertion {self} raised {type(err).__name__} instead of failing: {err}",
                cause=err,
            )
        )

    def interpret(self, result: Any, match: Match) -> Outcome:
        """Turn an implementation's return value into an :class:`Outcome`."""
        subject = match.values[0]
        if result is None or result is True:
            return Passed()
        if result is False:
            return Failed(self._default_failure(match))
        if isinstance(result, AssertionFailure):
            return Failed(result.with_default_message(self._default_failure(match).message or ""))
        if isinstance(result, (Validator, TypeAdapter)):
            return self._validate(result, subject)
        if isinstance(result, ValidationResult):
            return validation_outcome(result, subject)
        if isinstance(result, ValidationRequest):
            checker = as_validator(result.validator)
            if checker is None:
                return Broken(
                    AssertionImplementationError(
                        f"Assertion {self} requested validation with {inspect_value(result.validator)}, "
                        "which is not a validator",
                        result=result,
                    )
                )
            return self._validate(checker, result.subject)
        if inspect.isawaitable(result):
            return self._unexpected_awaitable(result)
        return Broken(
            AssertionImplementationError(
                f"Invalid return type from assertion {self}: expected bool, None, Validator, "
                f"AssertionFailure or ValidationRequest, got {type(result).__name__}",
                result=result,
            )
        )

    def _unexpected_awaitable(self, result: Any) -> Outcome:
        close = getattr(result, "close", None)
        if close is not None:
            close()
        return Broken(
            UnexpectedAsyncError(
                f"Assertion {self} returned an awaitable; use check_async() instead of check()",
                result=result,
            )
        )


@dataclass(frozen=True, slots=True, eq=False)
class SyncAssertion(Assertion):
    """A registration evaluated synchronously by ``check``."""

    capability: ClassVar[Capability] = Capability.SYNC

    def execute(self, match: Match) -> Outcome:
        if isinstance(self.impl, Validator):
            return self._validate(self.impl, match.values[0])
        try:
            result = self.impl(*match.values)
        except Exception as err:
            return self._from_exception(err)
        return self.interpret(result, match)


@dataclass(frozen=True, slots=True, eq=False)
class AsyncAssertion(Assertion):
    """A registration evaluated by ``check_async``; its implementation may be a coroutine."""

    capability: ClassVar[Capability] = Capability.ASYNC

    async def execute(self, match: Match) -> Outcome:
        if isinstance(self.impl, Validator):
            return self._validate(self.impl, match.values[0])
        try:
            result = self.impl(*match.values)
            if inspect.isawaitable(result):
                result = await result
        except Exception as err:
            return self._from_exception(err)
        if inspect.isawaitable(result):
            close = getattr(result, "close", None)
            if close is not None:
                close()
            return Broken(
                AssertionImplementationError(
                    f"Assertion {self} resolved to another awaitable; await it inside the implementation",
                    result=result,
                )
            )
        return self.interpret(result, match)


def _coerce_metadata(metadata: AssertionMetadata | Mapping[str, Any] | None) -> AssertionMetadata:
    if metadata is None:
        return AssertionMetadata()
    if isinstance(metadata, AssertionMetadata):
        return metadata
    if isinstance(metadata, Mapping):
        try:
            return AssertionMetadata.model_validate(dict(metadata))
        except ValidationError as err:
            raise InvalidMetadataError(f"Invalid assertion metadata: {err}", metadata=metadata) from err
    raise InvalidMetadataError(
        f"Assertion metadata must be a mapping or AssertionMetadata, got {type(metadata).__name__}",
        metadata=metadata,
    )


def _coerce_impl(impl: Any) -> Callable[..., Any] | Validator:
    if isinstance(impl, (str, bytes)):
        checker = None
    elif isinstance(impl, Validator):
        return impl
    elif isinstance(impl, TypeAdapter) or isinstance(impl, type) or not callable(impl):
        checker = as_validator(impl)
    else:
        return impl
    if checker is None:
        raise AssertionConfigurationError(
            "Assertion implementation must be a function or a validator, got "
            f"{inspect_value(impl)} ({type(impl).__name__})",
            part=impl,
        )
    return checker


def _build(
    cls: type[Assertion],
    parts: Sequence[Any],
    impl: Any,
    metadata: AssertionMetadata | Mapping[str, Any] | None,
) -> Assertion:
    slots = compile_slots(parts)
    return cls(
        parts=tuple(parts),
        slots=slots,
        impl=_coerce_impl(impl),
        metadata=_coerce_metadata(metadata),
    )


def create_assertion(
    parts: Sequence[Any],
    impl: Any,
    metadata: AssertionMetadata | Mapping[str, Any] | None = None,
) -> SyncAssertion:
    """Create a synchronous assertion.

    Parameters
    ----------
    parts
        Phrases, phrase choices and validators describing the call shape,
        e.g. ``[int, "to be greater than", int]`` or ``["to be even"]``.
    impl
        Called with the subject and parameter values. Returns ``True``/``None``
        to pass, ``False`` or an :class:`AssertionFailure` to fail, or a
        validator to apply to the subject. May also be a validator or type
        applied to the subject directly.
    metadata
        Optional documentation metadata.

    Raises
    ------
    AssertionConfigurationError
        If the parts or implementation are malformed.

    Example:
        >>> is_even = create_assertion(["to be even"], lambda n: n % 2 == 0)
    """
    return _build(SyncAssertion, parts, impl, metadata)


def create_async_assertion(
    parts: Sequence[Any],
    impl: Any,
    metadata: AssertionMetadata | Mapping[str, Any] | None = None,
) -> AsyncAssertion:
    """Create an asynchronous assertion; ``impl`` may be an ``async def`` function."""
    return _build(AsyncAssertion, parts, impl, metadata)
