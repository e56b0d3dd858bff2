"""Validators: the capability that decides whether a value satisfies a constraint.

Three kinds are provided:

- :class:`SchemaValidator`, backed by a pydantic ``TypeAdapter`` in strict
  mode, for types and typing forms (``int``, ``list[str]``,
  ``Annotated[int, Gt(0)]``).
- :class:`PredicateValidator`, backed by a plain callable returning a truthy
  or falsy value.
- :data:`ANY`, which accepts everything.

Anything that quacks like a validator can be turned into one with
:func:`as_validator`.
"""

from __future__ import annotations

import inspect
import typing
from abc import ABC, abstractmethod
from collections.abc import Callable
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, PydanticUserError, TypeAdapter, ValidationError

from phrasal._internal.formatting import inspect_value
from phrasal.errors import UnexpectedAsyncError


class ValidationResult(BaseModel):
    """Outcome of validating a single value.

    Attributes
    ----------
    ok
        Whether the value was accepted.
    validator
        Name of the validator that produced this result.
    message
        Why the value was rejected, if it was.
    issues
        Individual problems found, most specific first.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    validator: str
    message: str | None = None
    issues: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.ok


class Validator(ABC):
    """Base class for validators."""

    name: str = "validator"

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Validate ``value`` and describe the outcome."""

    def accepts(self, value: Any) -> bool:
        return self.validate(value).ok

    def _accept(self) -> ValidationResult:
        return ValidationResult(ok=True, validator=self.name)

    def _reject(self, message: str, issues: tuple[str, ...] = ()) -> ValidationResult:
        return ValidationResult(ok=False, validator=self.name, message=message, issues=issues)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class AnyValidator(Validator):
    """Accepts every value."""

    name = "any"

    def validate(self, value: Any) -> ValidationResult:
        return self._accept()

    def accepts(self, value: Any) -> bool:
        return True


ANY = AnyValidator()


def _is_type_form(obj: Any) -> bool:
    return isinstance(obj, type) or obj is Any or typing.get_origin(obj) is not None


def _type_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return repr(annotation).replace("typing.", "")


def _build_adapter(annotation: Any) -> TypeAdapter:
    try:
        return TypeAdapter(annotation, config=ConfigDict(arbitrary_types_allowed=True))
    except PydanticUserError:
        # models, dataclasses and TypedDicts carry their own config
        return TypeAdapter(annotation)


@lru_cache(maxsize=512)
def _cached_adapter(annotation: Any) -> TypeAdapter:
    return _build_adapter(annotation)


def _adapter_for(annotation: Any) -> TypeAdapter:
    try:
        hash(annotation)
    except TypeError:
        return _build_adapter(annotation)
    return _cached_adapter(annotation)


class SchemaValidator(Validator):
    """Validates values against a type using a pydantic ``TypeAdapter``.

    Strict mode is the default, so ``"1"`` is not an ``int`` and ``1`` is not
    a ``str``.
    """

    def __init__(
        self,
        annotation: Any = None,
        *,
        adapter: TypeAdapter | None = None,
        strict: bool = True,
        name: str | None = None,
    ) -> None:
        if adapter is None and annotation is None:
            raise TypeError("SchemaValidator needs an annotation or a TypeAdapter")
        self.annotation = annotation
        self.adapter = adapter if adapter is not None else _adapter_for(annotation)
        self.strict = strict
        self.name = name or (_type_name(annotation) if annotation is not None else "schema")

    def validate(self, value: Any) -> ValidationResult:
        try:
            self.adapter.validate_python(value, strict=self.strict)
        except ValidationError as err:
            issues = tuple(error["msg"] for error in err.errors())
            return self._reject(
                f"Expected {self.name}, got {inspect_value(value)}",
                issues,
            )
        return self._accept()


class PredicateValidator(Validator):
    """Validates values with a callable.

    A truthy return accepts the value. A :class:`ValidationResult` return is
    passed through. Raising is treated as rejection and the exception is
    reported in the result's message.
    """

    def __init__(self, fn: Callable[[Any], Any], *, name: str | None = None) -> None:
        self.fn = fn
        self.name = name or getattr(fn, "__name__", None) or "predicate"
        if self.name == "<lambda>":
            self.name = "predicate"

    def validate(self, value: Any) -> ValidationResult:
        try:
            result = self.fn(value)
        except Exception as err:
            return self._reject(
                f"{self.name} raised {type(err).__name__}: {err} for {inspect_value(value)}"
            )
        if inspect.isawaitable(result):
            close = getattr(result, "close", None)
            if close is not None:
                close()
            raise UnexpectedAsyncError(
                f"Validator {self.name} returned an awaitable; validators must be synchronous"
            )
        if isinstance(result, ValidationResult):
            return result
        if result:
            return self._accept()
        return self._reject(f"Expected {inspect_value(value)} to satisfy {self.name}")


def schema(annotation: Any, *, strict: bool = True, name: str | None = None) -> SchemaValidator:
    """Build a validator for a type or typing form."""
    return SchemaValidator(annotation, strict=strict, name=name)


def satisfies(fn: Callable[[Any], Any], *, name: str | None = None) -> PredicateValidator:
    """Build a validator from a predicate function."""
    return PredicateValidator(fn, name=name)


def instance_of(*classes: type, name: str | None = None) -> PredicateValidator:
    """Build a validator that accepts instances of any of ``classes``."""
    label = name or " | ".join(cls.__name__ for cls in classes)
    return PredicateValidator(lambda value: isinstance(value, classes), name=label)


def validator(fn: Callable[[Any], Any] | None = None, *, name: str | None = None):
    """Decorator turning a predicate function into a :class:`PredicateValidator`.

    Example:
        >>> @validator
        >>> def even(value):
        >>>     return value % 2 == 0
        >>>
        >>> even.accepts(4)
        True
    """
    if fn is None:
        return lambda inner: PredicateValidator(inner, name=name)
    return PredicateValidator(fn, name=name)


def is_validator_like(obj: Any) -> bool:
    """Whether :func:`as_validator` would accept ``obj``."""
    if isinstance(obj, str):
        return False
    return isinstance(obj, (Validator, TypeAdapter)) or _is_type_form(obj) or callable(obj)


def as_validator(obj: Any) -> Validator | None:
    """Coerce ``obj`` to a :class:`Validator`.

    Returns ``None`` for values that cannot validate anything (strings,
    numbers, ``None``, containers).
    """
    if isinstance(obj, Validator):
        return obj
    if isinstance(obj, str):
        return None
    if isinstance(obj, TypeAdapter):
        return SchemaValidator(adapter=obj)
    if _is_type_form(obj):
        return SchemaValidator(obj)
    if callable(obj):
        return PredicateValidator(obj)
    return None
