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
from phrasal.assertions.assertion import (
    Assertion,
    AsyncAssertion,
    Match,
    SyncAssertion,
    create_assertion,
    create_async_assertion,
)
from phrasal.assertions.slots import compile_slots


__all__ = [
    "Assertion",
    "AssertionFailure",
    "AssertionMetadata",
    "AsyncAssertion",
    "Broken",
    "Capability",
    "Failed",
    "Match",
    "Outcome",
    "Passed",
    "SyncAssertion",
    "ValidationRequest",
    "compile_slots",
    "create_assertion",
    "create_async_assertion",
]
