"""
Event System for emitkit.

Purpose
-------
Provides the emitter core: a listener registry, the invocation strategies
that drive it, and the Emitter composing the two.
"""

from .emitter import Emitter
from .registry import ListenerRegistry
from .strategies import (
    DefaultStrategy,
    EmitStrategy,
    InvocationsHandler,
    StrategyFactory,
    await_all,
    await_all_settled,
    await_each,
    awaiting_all,
    awaiting_all_settled,
    awaiting_each,
    default_strategy,
    ignore_each,
    ignoring_each,
)
from .types import (
    EventMap,
    EventName,
    Fulfilled,
    Listener,
    ListenerEntry,
    ListenerKind,
    Rejected,
    SettledResult,
    SettledStatus,
)

__all__ = [
    "Emitter",
    "ListenerRegistry",
    "DefaultStrategy",
    "EmitStrategy",
    "InvocationsHandler",
    "StrategyFactory",
    "default_strategy",
    "ignoring_each",
    "awaiting_each",
    "awaiting_all",
    "awaiting_all_settled",
    "ignore_each",
    "await_each",
    "await_all",
    "await_all_settled",
    "EventMap",
    "EventName",
    "Listener",
    "ListenerEntry",
    "ListenerKind",
    "Fulfilled",
    "Rejected",
    "SettledResult",
    "SettledStatus",
]
