"""
Emitter: typed publish/subscribe with pluggable emission strategies.

Purpose
-------
Composes one ListenerRegistry with one strategy. `on`/`once`/`off` mutate the
registry; `emit` is the strategy itself, so what emitting returns (nothing,
an awaitable, a list of results, settled outcomes) is decided at
construction.

Design Decisions
----------------
- **Strategy factory**: The registry is created first and handed to the
  factory, which returns the object stored as `emit`. Swapping the factory is
  the extension point for custom aggregation policies.
- **`emit` is a plain attribute**: It can be captured and stored elsewhere
  (for instance by a class that keeps emitting private while re-exposing
  `on`/`once`) without rebinding.
- **No lifecycle**: An emitter has no started/stopped state.

Examples
--------
>>> emitter = Emitter.create()
>>> emitter.on("saved", audit).once("saved", notify_first_save)
>>> emitter.emit("saved", doc)
>>> results = await emitter.emit.await_all("saved", doc)
"""

from __future__ import annotations

import asyncio
from typing import Any, Generic, Optional, TypeVar

from emitkit.core.exceptions import StrategyFactoryError
from emitkit.core.logging.logger import get_logger
from emitkit.core.event.registry import ListenerRegistry
from emitkit.core.event.strategies import (
    DefaultStrategy,
    EmitStrategy,
    StrategyFactory,
    awaiting_all,
    awaiting_all_settled,
    awaiting_each,
    default_strategy,
    ignoring_each,
)
from emitkit.core.event.types import EventName, Listener, SettledResult

logger = get_logger(__name__)

S = TypeVar("S", bound=EmitStrategy[Any])


class Emitter(Generic[S]):
    """
    Event emitter bound to a single emission strategy.

    Listeners are invoked in registration order. How they are invoked, and
    what `emit` returns, depends on the strategy attached to the emitter.

    Attributes
    ----------
    emit:
        The strategy produced by the factory at construction.
    """

    __slots__ = ("_registry", "emit")

    def __init__(self, *, registry: ListenerRegistry, emit: S) -> None:
        self._registry = registry
        self.emit: S = emit

    # ------------------------------------------------------------------ #
    # Subscription API
    # ------------------------------------------------------------------ #

    def on(self, event: EventName, listener: Listener) -> Emitter[S]:
        """
        Register a listener for `event`.

        The same listener may be registered several times; each registration
        is invoked separately.

        Returns
        -------
        Emitter:
            This emitter, for chaining.

        Raises
        ------
        InvalidListenerError:
            If `listener` is not callable.
        """
        self._registry.add(event, listener)
        logger.debug(
            "Emitter: registered listener",
            extra={"event": str(event), "listener": _listener_name(listener), "once": False},
        )
        return self

    def once(self, event: EventName, listener: Listener) -> Emitter[S]:
        """
        Register a one-time listener for `event`.

        Regardless of the strategy, the listener is removed as part of its
        first invocation.

        Returns
        -------
        Emitter:
            This emitter, for chaining.
        """
        self._registry.add_once(event, listener)
        logger.debug(
            "Emitter: registered listener",
            extra={"event": str(event), "listener": _listener_name(listener), "once": True},
        )
        return self

    def off(self, event: EventName, listener: Listener) -> Emitter[S]:
        """
        Remove the earliest registration of `listener` for `event`.

        Removing a listener that was never registered is a no-op.
        """
        if self._registry.remove(event, listener):
            logger.debug(
                "Emitter: removed listener",
                extra={"event": str(event), "listener": _listener_name(listener)},
            )
        return self

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def listener_count(self, event: Optional[EventName] = None) -> int:
        return self._registry.listener_count(event)

    def event_names(self) -> list[EventName]:
        return self._registry.event_names()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(strategy={self.emit!r}, "
            f"listeners={self._registry.listener_count()})"
        )

    # ------------------------------------------------------------------ #
    # Factories
    # ------------------------------------------------------------------ #

    @classmethod
    def with_strategy_factory(cls, strategy_factory: StrategyFactory[S]) -> Emitter[S]:
        """
        Create an emitter with a custom strategy factory.

        A fresh registry is created and the factory is invoked once on it;
        whatever it returns becomes `emit`.

        Raises
        ------
        StrategyFactoryError:
            If the factory does not return a callable.
        """
        registry = ListenerRegistry()
        strategy = strategy_factory(registry)
        if not callable(strategy):
            raise StrategyFactoryError(strategy_factory, strategy)
        return cls(registry=registry, emit=strategy)

    @classmethod
    def create(cls) -> Emitter[DefaultStrategy]:
        """
        Create an emitter with the DefaultStrategy.

        `emit(...)` ignores results; `emit.await_each`, `emit.await_all` and
        `emit.await_all_settled` are available per call.
        """
        return cls.with_strategy_factory(default_strategy)

    @classmethod
    def ignoring_each(cls) -> Emitter[EmitStrategy[None]]:
        """Create an emitter whose `emit` only invokes synchronously and ignores results."""
        return cls.with_strategy_factory(ignoring_each)

    @classmethod
    def awaiting_each(cls) -> Emitter[EmitStrategy[asyncio.Future[None]]]:
        """Create an emitter whose `emit` awaits each listener before invoking the next."""
        return cls.with_strategy_factory(awaiting_each)

    @classmethod
    def awaiting_all(cls) -> Emitter[EmitStrategy[asyncio.Future[list[Any]]]]:
        """Create an emitter whose `emit` starts all listeners and gathers their results."""
        return cls.with_strategy_factory(awaiting_all)

    @classmethod
    def awaiting_all_settled(
        cls,
    ) -> Emitter[EmitStrategy[asyncio.Future[list[SettledResult]]]]:
        """Create an emitter whose `emit` starts all listeners and collects every outcome."""
        return cls.with_strategy_factory(awaiting_all_settled)


def _listener_name(listener: Listener) -> str:
    return getattr(listener, "__qualname__", None) or getattr(
        listener, "__name__", repr(listener)
    )
