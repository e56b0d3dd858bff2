"""Composition: layering new assertions over existing registries."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import lru_cache

from phrasal.assertions.assertion import Assertion, AsyncAssertion, SyncAssertion
from phrasal.assertions.builtin import SYNC_ASSERTIONS
from phrasal.assertions.builtin_async import ASYNC_ASSERTIONS
from phrasal.dispatch.dispatcher import AsyncDispatcher, RegistrySnapshot, SyncDispatcher


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CheckKit:
    """A ``check``/``check_async`` pair over one registry snapshot.

    Attributes
    ----------
    check : SyncDispatcher
        Synchronous dispatcher.
    check_async : AsyncDispatcher
        Asynchronous dispatcher.

    Examples
    --------
    >>> kit = extend_with([create_assertion(["to be even"], lambda n: n % 2 == 0)])
    >>> kit.check(4, "to be even")
    >>> more = kit.extend_with([...])  # kit itself is unchanged
    """

    check: SyncDispatcher
    check_async: AsyncDispatcher

    @classmethod
    def from_snapshot(cls, snapshot: RegistrySnapshot) -> CheckKit:
        logger.debug(
            "Built kit with %d sync and %d async assertions",
            len(snapshot.sync_assertions),
            len(snapshot.async_assertions),
        )
        return cls(check=SyncDispatcher(snapshot), check_async=AsyncDispatcher(snapshot))

    @property
    def snapshot(self) -> RegistrySnapshot:
        return self.check.snapshot

    def extend_with(self, assertions: Iterable[Assertion]) -> CheckKit:
        return CheckKit.from_snapshot(self.snapshot.extend(assertions))

    def __iter__(self):
        # allows ``check, check_async = kit``
        yield self.check
        yield self.check_async


def compose(
    sync_assertions: Iterable[SyncAssertion] = (),
    async_assertions: Iterable[AsyncAssertion] = (),
) -> Callable[[Iterable[Assertion]], CheckKit]:
    """Return an ``extend_with`` function layered over the given base registries.

    The base registrations keep priority over anything added later, so a
    new assertion with the same call shape as a base one is never reached.
    """
    base = RegistrySnapshot(tuple(sync_assertions), tuple(async_assertions))

    def extend_with(assertions: Iterable[Assertion]) -> CheckKit:
        return CheckKit.from_snapshot(base.extend(assertions))

    return extend_with


@lru_cache(maxsize=1)
def bootstrap() -> CheckKit:
    """The default kit, built from the built-in assertions."""
    return compose(SYNC_ASSERTIONS, ASYNC_ASSERTIONS)([])
