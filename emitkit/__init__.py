"""
emitkit: an in-process typed publish/subscribe core with emission strategies.

>>> from emitkit import Emitter
>>> emitter = Emitter.create()
>>> _ = emitter.on("greet", print)
>>> emitter.emit("greet", "hello")
hello
"""

from emitkit.core.event import (
    DefaultStrategy,
    EmitStrategy,
    Emitter,
    EventMap,
    Fulfilled,
    Listener,
    ListenerRegistry,
    Rejected,
    SettledResult,
    SettledStatus,
    StrategyFactory,
    awaiting_all,
    awaiting_all_settled,
    awaiting_each,
    default_strategy,
    ignoring_each,
)
from emitkit.core.exceptions import (
    EmitterError,
    InvalidListenerError,
    StrategyFactoryError,
)

__version__ = "0.1.0"

__all__ = [
    "Emitter",
    "ListenerRegistry",
    "DefaultStrategy",
    "EmitStrategy",
    "StrategyFactory",
    "default_strategy",
    "ignoring_each",
    "awaiting_each",
    "awaiting_all",
    "awaiting_all_settled",
    "EventMap",
    "Listener",
    "Fulfilled",
    "Rejected",
    "SettledResult",
    "SettledStatus",
    "EmitterError",
    "InvalidListenerError",
    "StrategyFactoryError",
]
