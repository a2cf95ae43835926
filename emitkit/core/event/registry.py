"""
ListenerRegistry: Storage and lazy invocation of emitter listeners.

Purpose
-------
Holds, per event name, the ordered listeners registered on one Emitter and
produces the lazy sequence of listener results that every strategy consumes.

Responsibilities
----------------
- Append persistent (`on`) and single-shot (`once`) listeners
- Remove the earliest entry registered with a given handler
- Produce a lazy, non-restartable iterator of invocation results
- Remove once-listeners as part of producing their result
- Provide introspection (counts, event keys, registered handlers)

Design Decisions
----------------
- **No async/await**: The registry is synchronous. Strategies decide whether
  and how results are awaited.
- **Insertion order is invocation order**: No sorting, no deduplication.
- **Pull-driven invocation**: A handler runs only when the consumer asks for
  the next element. The sequential-await strategy relies on this to start
  listener k+1 only after listener k has settled.
- **Snapshot with liveness check**: A traversal walks the entries registered
  when it started. Entries added mid-traversal wait for the next emission;
  entries removed mid-traversal (explicitly, or consumed as once-listeners by
  a re-entrant emission) are skipped.
- **Once-removal before invocation**: A once-entry leaves the registry right
  before its handler is called, so an emission of the same event issued from
  inside that handler already sees it gone.

Thread Safety
-------------
Not thread-safe. Designed for single-threaded use (plain code or one asyncio
event loop). The registry tolerates mutation while a traversal is in flight.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from emitkit.core.exceptions import InvalidListenerError
from emitkit.core.event.types import EventName, Listener, ListenerEntry, ListenerKind


class ListenerRegistry:
    """
    Registry of listeners for one Emitter.

    Examples
    --------
    >>> registry = ListenerRegistry()
    >>> _ = registry.add("ready", lambda n: n * 2)
    >>> _ = registry.add_once("ready", lambda n: n + 1)
    >>> list(registry.invocations("ready", 10))
    [20, 11]
    >>> list(registry.invocations("ready", 10))
    [20]
    """

    def __init__(self) -> None:
        self._listeners: dict[EventName, list[ListenerEntry]] = {}

    # ------------------------------------------------------------------ #
    # Modification
    # ------------------------------------------------------------------ #

    def add(self, event: EventName, handler: Listener) -> ListenerEntry:
        """
        Append a persistent listener for `event`.

        Raises
        ------
        InvalidListenerError:
            If `handler` is not callable.
        """
        return self._append(event, handler, ListenerKind.ON)

    def add_once(self, event: EventName, handler: Listener) -> ListenerEntry:
        """
        Append a single-shot listener for `event`.

        The entry removes itself from this registry as part of its first
        invocation.

        Raises
        ------
        InvalidListenerError:
            If `handler` is not callable.
        """
        return self._append(event, handler, ListenerKind.ONCE)

    def remove(self, event: EventName, handler: Listener) -> bool:
        """
        Remove the earliest entry registered for `event` with `handler`.

        Later duplicates of the same handler stay registered. Unknown events
        and handlers are a no-op.

        Returns
        -------
        bool:
            True if an entry was removed, False otherwise.
        """
        entries = self._listeners.get(event)
        if not entries:
            return False

        for index, entry in enumerate(entries):
            if entry.matches(handler):
                del entries[index]
                if not entries:
                    del self._listeners[event]
                return True

        return False

    def clear(self, event: Optional[EventName] = None) -> int:
        """
        Remove all listeners for `event`, or for every event if None.

        Returns
        -------
        int:
            Number of listeners removed.
        """
        if event is None:
            total = self.listener_count()
            self._listeners.clear()
            return total

        return len(self._listeners.pop(event, []))

    def _append(
        self, event: EventName, handler: Listener, kind: ListenerKind
    ) -> ListenerEntry:
        if not callable(handler):
            raise InvalidListenerError(event, handler)

        entry = ListenerEntry(handler=handler, kind=kind)
        self._listeners.setdefault(event, []).append(entry)
        return entry

    def _discard(self, event: EventName, entry: ListenerEntry) -> None:
        entries = self._listeners.get(event)
        if not entries:
            return

        for index, candidate in enumerate(entries):
            if candidate is entry:
                del entries[index]
                break

        if not entries:
            del self._listeners[event]

    def _is_registered(self, event: EventName, entry: ListenerEntry) -> bool:
        return any(candidate is entry for candidate in self._listeners.get(event, ()))

    # ------------------------------------------------------------------ #
    # Invocation
    # ------------------------------------------------------------------ #

    def invocations(
        self, event: EventName, *args: Any, **kwargs: Any
    ) -> Iterator[Any]:
        """
        Lazily invoke the listeners of `event`, yielding each result in order.

        Nothing runs until the first element is pulled. Each pull calls
        exactly one handler with `args` and `kwargs`. An exception raised by
        a handler propagates out of that pull and ends the traversal, so the
        remaining listeners are not invoked.

        Parameters
        ----------
        event:
            The event being emitted.
        *args, **kwargs:
            Arguments passed to every listener.

        Returns
        -------
        Iterator[Any]:
            Single-use iterator over listener results. Results that are
            awaitables are yielded as-is.

        Examples
        --------
        >>> for result in registry.invocations("saved", doc):
        ...     print(result)
        """
        snapshot = list(self._listeners.get(event, ()))

        for entry in snapshot:
            if not self._is_registered(event, entry):
                continue
            if entry.once:
                self._discard(event, entry)
            yield entry.invoke(*args, **kwargs)

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def listener_count(self, event: Optional[EventName] = None) -> int:
        """Number of listeners for `event`, or across all events if None."""
        if event is not None:
            return len(self._listeners.get(event, ()))
        return sum(len(entries) for entries in self._listeners.values())

    def listeners(self, event: EventName) -> list[Listener]:
        """Handlers registered for `event`, in invocation order."""
        return [entry.handler for entry in self._listeners.get(event, ())]

    def event_names(self) -> list[EventName]:
        """Events that currently have at least one listener, in first-registration order."""
        return list(self._listeners.keys())
