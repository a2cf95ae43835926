"""
Core Event Types for emitkit.

Purpose
-------
Provides fundamental type definitions for the emitter core: listener
callables, listener entries stored by the registry, and the per-listener
outcome records produced by the all-settled strategy.

Design Decisions
----------------
- **Listener as plain callable**: Listeners take any positional and keyword
  arguments and may return anything, including awaitables. Whether a result
  is ignored or awaited is decided by the strategy, never by the listener.
- **EventMap as a typing contract**: The mapping from event name to listener
  signature lives in the caller's type annotations. At runtime the registry
  only sees event keys and type-erased callables.
- **Entries compare by identity**: The same function registered twice yields
  two independent entries; removing one never removes the other.
- **Settled outcomes**: Frozen dataclasses mirroring the allSettled record
  shape (`status` plus `value` or `reason`).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable, Mapping, Union

# Type alias for listener callables.
# Sync or async, any arguments, any result.
Listener = Callable[..., Any]

# Type alias for event keys. Conventionally strings.
EventName = Hashable

# Caller-supplied contract: event name -> listener signature.
EventMap = Mapping[str, Listener]


class ListenerKind(Enum):
    """
    How a registered listener behaves after being invoked.

    Values
    ------
    ON:
        Persistent. Invoked on every emission of its event.
    ONCE:
        Single-shot. Removed from the registry as part of its first invocation.
    """

    ON = "on"
    ONCE = "once"


@dataclass(eq=False, slots=True, frozen=True)
class ListenerEntry:
    """
    A registered listener.

    The entry only holds a reference to the handler; it does not own any
    state the handler closes over.

    Attributes
    ----------
    handler:
        The callable invoked on emission.
    kind:
        ListenerKind.ON or ListenerKind.ONCE.
    """

    handler: Listener
    kind: ListenerKind = ListenerKind.ON

    @property
    def once(self) -> bool:
        return self.kind is ListenerKind.ONCE

    def matches(self, handler: Listener) -> bool:
        """
        Whether this entry was registered with `handler`.

        Uses equality rather than identity so that bound methods, which are
        recreated on every attribute access, still match.
        """
        return self.handler == handler

    def invoke(self, *args: Any, **kwargs: Any) -> Any:
        return self.handler(*args, **kwargs)


class SettledStatus(str, Enum):
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class Fulfilled:
    """A listener result that settled successfully."""

    value: Any

    @property
    def status(self) -> SettledStatus:
        return SettledStatus.FULFILLED


@dataclass(frozen=True, slots=True)
class Rejected:
    """A listener result that settled with an exception."""

    reason: BaseException

    @property
    def status(self) -> SettledStatus:
        return SettledStatus.REJECTED


SettledResult = Union[Fulfilled, Rejected]
