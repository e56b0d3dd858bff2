"""Error taxonomy for registration, dispatch and evaluation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from phrasal.diff import format_failure_diff


if TYPE_CHECKING:
    from phrasal.assertions._base import AssertionFailure


FAIL_ID = "fail"


class PhrasalError(Exception):
    """Base class for errors raised by phrasal itself.

    These signal authoring mistakes or unmatched calls, never a failed check;
    failed checks raise :class:`AssertionFailedError`.
    """

    code: ClassVar[str] = "ERR_PHRASAL"


class AssertionConfigurationError(PhrasalError, TypeError):
    """Malformed assertion parts or implementation, raised at registration time.

    Attributes
    ----------
    index : int | None
        Position of the offending part, when one can be named.
    part : Any
        The offending part or implementation.
    """

    code: ClassVar[str] = "ERR_PHRASAL_CONFIG"

    def __init__(self, message: str, *, index: int | None = None, part: Any = None) -> None:
        super().__init__(message)
        self.index = index
        self.part = part


class InvalidMetadataError(AssertionConfigurationError):
    """Registration metadata did not validate."""

    code: ClassVar[str] = "ERR_PHRASAL_INVALID_METADATA"

    def __init__(self, message: str, *, metadata: Any = None) -> None:
        super().__init__(message, part=metadata)
        self.metadata = metadata


class UnknownAssertionError(PhrasalError, TypeError):
    """No registration matched the shape of a call.

    Attributes
    ----------
    subject : Any
        The subject the call was made with.
    args : tuple
        The full argument tuple, subject first.
    """

    code: ClassVar[str] = "ERR_PHRASAL_UNKNOWN_ASSERTION"

    def __init__(self, message: str, *, subject: Any, args: tuple[Any, ...]) -> None:
        super().__init__(message)
        self.subject = subject
        # Exception.args is reserved for the message
        self.call_args = args

    @property
    def phrases(self) -> list[str]:
        return [arg for arg in self.call_args[1:] if isinstance(arg, str)]


class AssertionImplementationError(PhrasalError):
    """An implementation broke its return or raise contract.

    The original exception, when there was one, is the ``__cause__``.
    """

    code: ClassVar[str] = "ERR_PHRASAL_ASSERTION_IMPL"

    def __init__(
        self, message: str, *, result: Any = None, cause: BaseException | None = None
    ) -> None:
        super().__init__(message)
        self.result = result
        if cause is not None:
            self.__cause__ = cause


class UnexpectedAsyncError(AssertionImplementationError):
    """A synchronous check produced an awaitable; use ``check_async`` instead."""

    code: ClassVar[str] = "ERR_PHRASAL_UNEXPECTED_ASYNC"


class AssertionFailedError(AssertionError):
    """AssertionError with the structured failure attached.

    Attributes
    ----------
    failure : AssertionFailure
        What the implementation reported: actual, expected, message and
        optional diff and formatters.
    assertion_id : str | None
        Id of the registration that failed, or ``"fail"`` for explicit fails.
    diff : str | None
        Rendered diff between expected and actual, when one could be built.
    """

    def __init__(self, failure: AssertionFailure, *, assertion_id: str | None = None) -> None:
        self.failure = failure
        self.assertion_id = assertion_id
        self.diff = format_failure_diff(failure)
        message = failure.message or "Assertion failed"
        if self.diff:
            message += f"\n\n{self.diff}"
        super().__init__(message)

    @property
    def message(self) -> str:
        return self.failure.message or "Assertion failed"

    @property
    def actual(self) -> Any:
        return self.failure.actual if self.failure.has_actual else None

    @property
    def expected(self) -> Any:
        return self.failure.expected if self.failure.has_expected else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": type(self).__name__,
            "assertion_id": self.assertion_id,
            "message": self.message,
            "actual": self.actual,
            "expected": self.expected,
            "diff": self.diff,
        }


class NegatedAssertionError(AssertionFailedError):
    """A negated check's relation unexpectedly held."""


class FailAssertionError(AssertionFailedError):
    """Raised by an explicit ``fail()``."""

    def __init__(self, reason: str | None = None) -> None:
        from phrasal.assertions._base import AssertionFailure

        super().__init__(AssertionFailure(message=reason or "Explicit failure"), assertion_id=FAIL_ID)
