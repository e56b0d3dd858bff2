"""Result and metadata types shared by registrations and the dispatcher."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Capability(str, Enum):
    """Whether a registration runs synchronously or yields a deferred result."""

    SYNC = "sync"
    ASYNC = "async"


class AssertionFailure(BaseModel):
    """Structured description of a relation that did not hold.

    Implementations return (or raise via :class:`~phrasal.errors.AssertionFailedError`)
    one of these to control what the test runner shows.

    Attributes
    ----------
    actual
        The value or description of what actually happened.
    expected
        The value or description of what was expected.
    message
        Human-readable description of the failure.
    diff
        Pre-rendered diff; bypasses diff generation entirely.
    diff_options
        Options for diff generation; ``context`` sets the number of context lines.
    format_actual, format_expected
        Applied to ``actual``/``expected`` before they are diffed.

    Notes
    -----
    ``actual`` and ``expected`` are only considered present when they were
    passed explicitly, so ``actual=None`` is distinguishable from "no actual".
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    actual: Any = None
    expected: Any = None
    message: str | None = None
    diff: str | None = None
    diff_options: dict[str, Any] | None = None
    format_actual: Callable[[Any], Any] | None = None
    format_expected: Callable[[Any], Any] | None = None

    @property
    def has_actual(self) -> bool:
        return "actual" in self.model_fields_set

    @property
    def has_expected(self) -> bool:
        return "expected" in self.model_fields_set

    def with_default_message(self, message: str) -> AssertionFailure:
        if self.message:
            return self
        data = {name: getattr(self, name) for name in self.model_fields_set}
        data["message"] = message
        return type(self)(**data)


class ValidationRequest(BaseModel):
    """Ask the dispatcher to validate ``subject`` with ``validator``.

    Returned by implementations that need to validate something other than
    the call's subject, such as a value derived from it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    subject: Any
    validator: Any


class AssertionMetadata(BaseModel):
    """Documentation metadata for a registration.

    Never consulted during matching.

    Attributes
    ----------
    name
        Display name used instead of the rendered signature.
    category
        Group the registration belongs to (e.g. ``"numeric"``).
    anchor
        Cross-reference tag for documentation tooling.
    description
        Free-form description.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = None
    category: str | None = None
    anchor: str | None = None
    description: str | None = None
    tags: tuple[str, ...] = Field(default_factory=tuple)


# Tagged outcome of running an implementation


@dataclass(frozen=True, slots=True)
class Passed:
    pass


@dataclass(frozen=True, slots=True)
class Failed:
    failure: AssertionFailure
    cause: BaseException | None = None


@dataclass(frozen=True, slots=True)
class Broken:
    error: Exception


Outcome = Passed | Failed | Broken
