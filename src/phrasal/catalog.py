"""Registration metadata for documentation tooling."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from phrasal.assertions._base import Capability
from phrasal.assertions.assertion import Assertion
from phrasal.dispatch.compose import CheckKit
from phrasal.dispatch.dispatcher import Dispatcher


class CatalogEntry(BaseModel):
    """Documentation view of one registration.

    Attributes
    ----------
    id : str
        Readable id, e.g. ``any-to-be-even-2s1p``.
    signature : str
        Rendered slots, e.g. ``{any} 'to be even'``.
    capability : Capability
        Whether the registration is used by ``check`` or ``check_async``.
    phrases : list[str]
        Every phrase the registration answers to.
    """

    id: str
    signature: str
    capability: Capability
    phrases: list[str]
    name: str | None = None
    category: str | None = None
    anchor: str | None = None
    description: str | None = None

    @classmethod
    def from_assertion(cls, assertion: Assertion) -> CatalogEntry:
        metadata = assertion.metadata
        return cls(
            id=assertion.id,
            signature=assertion.signature,
            capability=assertion.capability,
            phrases=list(assertion.phrases),
            name=metadata.name,
            category=metadata.category,
            anchor=metadata.anchor,
            description=metadata.description,
        )


def _assertions_of(source: Any) -> Iterable[Assertion]:
    if isinstance(source, CheckKit):
        return (*source.check.assertions, *source.check_async.assertions)
    if isinstance(source, Dispatcher):
        return source.assertions
    return source


def build_catalog(source: CheckKit | Dispatcher | Iterable[Assertion]) -> list[CatalogEntry]:
    """List the registrations of a kit, a dispatcher or a plain iterable, in priority order."""
    return [CatalogEntry.from_assertion(assertion) for assertion in _assertions_of(source)]
