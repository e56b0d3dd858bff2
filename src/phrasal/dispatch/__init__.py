from phrasal.dispatch.compose import CheckKit, bootstrap, compose
from phrasal.dispatch.dispatcher import (
    AsyncDispatcher,
    DeferredCheck,
    Dispatcher,
    RegistrySnapshot,
    SyncDispatcher,
    fail,
)
from phrasal.dispatch.matching import PhraseIndex, plan_call


__all__ = [
    "AsyncDispatcher",
    "CheckKit",
    "DeferredCheck",
    "Dispatcher",
    "PhraseIndex",
    "RegistrySnapshot",
    "SyncDispatcher",
    "bootstrap",
    "compose",
    "fail",
    "plan_call",
]
