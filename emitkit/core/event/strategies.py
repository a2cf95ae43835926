"""
Invocation strategies for emitkit.

Purpose
-------
A strategy decides how the listeners of one emission are run and how their
results are reported back to the caller of `emit`. Every strategy consumes
the registry's lazy invocation iterator; they differ only in how far they
pull it before waiting, and in what they do with failures.

Aggregations
------------
- ignore_each:
    Synchronous. Pulls every result in order and discards it. A listener
    that raises stops the emission and the exception reaches the caller.
- await_each:
    Sequential. Pulls one result, awaits it if it is awaitable, then pulls
    the next. A raise or a failed await aborts the remaining listeners.
- await_all:
    Eager. Pulls (starts) every listener first, then awaits all results
    together like asyncio.gather. The first failure fails the aggregate;
    listeners already started keep running.
- await_all_settled:
    Same eager pull; returns one Fulfilled/Rejected record per listener.
    Only failures of awaited results are captured. A listener raising while
    being pulled still propagates and stops the remaining listeners.

Starting vs. waiting
--------------------
The async aggregations are plain functions returning a future, not
coroutines. Listeners start at the call, so a caller that drops the future
still gets every listener run, and a listener raising while being pulled
raises at the call site. They need a running event loop.

Factories
---------
`ignoring_each`, `awaiting_each`, `awaiting_all` and `awaiting_all_settled`
bind one aggregation to a registry. `default_strategy` binds all four: its
primary call ignores results, and the other aggregations are available as
methods on the same object.

Custom strategies are any `StrategyFactory`: a callable receiving the
ListenerRegistry and returning the callable stored as `Emitter.emit`.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    Optional,
    Protocol,
    TypeVar,
)

from emitkit.core.logging.logger import get_logger
from emitkit.core.event.context import emission_log_context
from emitkit.core.event.registry import ListenerRegistry
from emitkit.core.event.types import EventName, Fulfilled, Rejected, SettledResult

logger = get_logger(__name__)

R_co = TypeVar("R_co", covariant=True)
S = TypeVar("S", bound="EmitStrategy[Any]")

# Receives the lazy invocation results of one emission.
InvocationsHandler = Callable[[Iterable[Any]], Any]


class EmitStrategy(Protocol[R_co]):
    """Callable stored as `Emitter.emit`: `(event, *args, **kwargs) -> R`."""

    def __call__(self, event: EventName, *args: Any, **kwargs: Any) -> R_co: ...


StrategyFactory = Callable[[ListenerRegistry], S]

# Coroutines discarded by ignore_each while a loop is running.
# Held here so they are not garbage collected before finishing.
_background_tasks: set[asyncio.Task[Any]] = set()


# ---------------------------------------------------------------------- #
# Aggregations
# ---------------------------------------------------------------------- #


def _detach(result: Any) -> None:
    if not inspect.iscoroutine(result):
        return

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No loop will ever drive it.
        result.close()
        return

    task = loop.create_task(result)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


def _settled_future(loop: asyncio.AbstractEventLoop, value: Any) -> asyncio.Future[Any]:
    future = loop.create_future()
    future.set_result(value)
    return future


def ignore_each(invocations: Iterable[Any]) -> None:
    """Invoke every listener in order, discarding the results."""
    for result in invocations:
        _detach(result)


async def _await_remaining(pending: Any, invocations: Iterator[Any]) -> None:
    await pending
    for result in invocations:
        if inspect.isawaitable(result):
            await result


def await_each(invocations: Iterable[Any]) -> asyncio.Future[None]:
    """
    Invoke listeners one at a time, awaiting each result before the next.

    Listeners run at the call until the first one returns an awaitable; the
    rest of the sequence continues in a task.

    Raises
    ------
    Exception:
        Raised at the call by a listener that fails before the first
        awaitable result. Later failures fail the returned future.
    """
    loop = asyncio.get_running_loop()
    remaining = iter(invocations)

    for result in remaining:
        if inspect.isawaitable(result):
            return asyncio.ensure_future(_await_remaining(result, remaining))

    return _settled_future(loop, None)


def _start_all(invocations: Iterable[Any]) -> list[asyncio.Future[Any]]:
    loop = asyncio.get_running_loop()
    started: list[asyncio.Future[Any]] = []

    for result in invocations:
        if inspect.isawaitable(result):
            started.append(asyncio.ensure_future(result))
        else:
            started.append(_settled_future(loop, result))

    return started


def await_all(invocations: Iterable[Any]) -> asyncio.Future[list[Any]]:
    """
    Start every listener, then gather their results in registration order.

    Raises
    ------
    Exception:
        Raised at the call by a listener failing while it is started. The
        first failure among the awaited results fails the returned future.
    """
    started = _start_all(invocations)
    if not started:
        return _settled_future(asyncio.get_running_loop(), [])
    return asyncio.gather(*started)


def _settle(future: asyncio.Future[Any]) -> SettledResult:
    if future.cancelled():
        return Rejected(asyncio.CancelledError())

    exc = future.exception()
    if exc is not None:
        return Rejected(exc)
    return Fulfilled(future.result())


async def _settle_all(started: list[asyncio.Future[Any]]) -> list[SettledResult]:
    if started:
        await asyncio.wait(started)
    return [_settle(future) for future in started]


def await_all_settled(invocations: Iterable[Any]) -> asyncio.Future[list[SettledResult]]:
    """
    Start every listener, then wait for all of them to settle.

    Returns
    -------
    asyncio.Future[list[SettledResult]]:
        One Fulfilled or Rejected record per listener, in registration order.

    Raises
    ------
    Exception:
        Only at the call, if a listener raises while being started. Failures
        of awaited results are reported as Rejected records instead.
    """
    return asyncio.ensure_future(_settle_all(_start_all(invocations)))


# ---------------------------------------------------------------------- #
# Binding aggregations to a registry
# ---------------------------------------------------------------------- #


def _strategy_name(handler: InvocationsHandler) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


def _emit(
    registry: ListenerRegistry,
    handler: InvocationsHandler,
    event: EventName,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> Any:
    name = _strategy_name(handler)
    with emission_log_context(event, name):
        logger.debug(
            "Emitting event",
            extra={
                "event": str(event),
                "aggregation": name,
                "listener_count": registry.listener_count(event),
            },
        )
        result = handler(registry.invocations(event, *args, **kwargs))
        # Custom async aggregations start now, like the built-in ones.
        if inspect.iscoroutine(result):
            return asyncio.ensure_future(result)
        return result


# ---------------------------------------------------------------------- #
# Factories
# ---------------------------------------------------------------------- #


def ignoring_each(registry: ListenerRegistry) -> EmitStrategy[None]:
    """
    StrategyFactory invoking listeners synchronously and ignoring their results.

    This is how a Node.js style `emit` behaves.
    """

    def emit(event: EventName, *args: Any, **kwargs: Any) -> None:
        _emit(registry, ignore_each, event, args, kwargs)

    return emit


def awaiting_each(registry: ListenerRegistry) -> EmitStrategy[asyncio.Future[None]]:
    """StrategyFactory awaiting each listener's result before invoking the next one."""

    def emit(event: EventName, *args: Any, **kwargs: Any) -> asyncio.Future[None]:
        return _emit(registry, await_each, event, args, kwargs)

    return emit


def awaiting_all(
    registry: ListenerRegistry,
) -> EmitStrategy[asyncio.Future[list[Any]]]:
    """StrategyFactory starting all listeners and gathering their results."""

    def emit(event: EventName, *args: Any, **kwargs: Any) -> asyncio.Future[list[Any]]:
        return _emit(registry, await_all, event, args, kwargs)

    return emit


def awaiting_all_settled(
    registry: ListenerRegistry,
) -> EmitStrategy[asyncio.Future[list[SettledResult]]]:
    """StrategyFactory starting all listeners and collecting every outcome."""

    def emit(
        event: EventName, *args: Any, **kwargs: Any
    ) -> asyncio.Future[list[SettledResult]]:
        return _emit(registry, await_all_settled, event, args, kwargs)

    return emit


class DefaultStrategy:
    """
    Strategy used by `Emitter.create()`.

    Calling it applies the primary aggregation (ignore_each unless another
    one was supplied). The four aggregations are also available as methods,
    all bound to the same registry, so each call site picks its own
    semantics:

    >>> emitter.emit("saved", doc)                         # ignore_each
    >>> await emitter.emit.await_each("saved", doc)        # sequential
    >>> results = await emitter.emit.await_all("saved", doc)
    >>> outcomes = await emitter.emit.await_all_settled("saved", doc)

    The async methods start listeners when called; awaiting the returned
    future is optional.
    """

    __slots__ = ("_registry", "_primary")

    def __init__(
        self,
        registry: ListenerRegistry,
        primary: Optional[InvocationsHandler] = None,
    ) -> None:
        self._registry = registry
        self._primary: InvocationsHandler = primary or ignore_each

    def __call__(self, event: EventName, *args: Any, **kwargs: Any) -> Any:
        return _emit(self._registry, self._primary, event, args, kwargs)

    def ignore_each(self, event: EventName, *args: Any, **kwargs: Any) -> None:
        _emit(self._registry, ignore_each, event, args, kwargs)

    def await_each(
        self, event: EventName, *args: Any, **kwargs: Any
    ) -> asyncio.Future[None]:
        return _emit(self._registry, await_each, event, args, kwargs)

    def await_all(
        self, event: EventName, *args: Any, **kwargs: Any
    ) -> asyncio.Future[list[Any]]:
        return _emit(self._registry, await_all, event, args, kwargs)

    def await_all_settled(
        self, event: EventName, *args: Any, **kwargs: Any
    ) -> asyncio.Future[list[SettledResult]]:
        return _emit(self._registry, await_all_settled, event, args, kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(primary={_strategy_name(self._primary)})"


def default_strategy(
    registry: ListenerRegistry,
    primary: Optional[InvocationsHandler] = None,
) -> DefaultStrategy:
    """
    StrategyFactory producing a DefaultStrategy.

    Parameters
    ----------
    registry:
        The registry the strategy pulls invocations from.
    primary:
        Aggregation used when the strategy itself is called. Defaults to
        ignore_each.
    """
    return DefaultStrategy(registry, primary)
