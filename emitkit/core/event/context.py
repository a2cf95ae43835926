"""
Emission Log Context Helpers for emitkit.

Purpose
-------
Scopes a LogContext around a single emission so that every record logged
while listeners run (including from tasks they start) carries the event name
and the strategy driving it.

Design Decisions
----------------
- **Scoped, not sticky**: The context is restored when the emission ends, so
  nested (re-entrant) emissions report their own event and the outer one
  resumes afterwards.
- **Event name as text**: Event keys may be any hashable; the log field is
  always its string form.
"""

from __future__ import annotations

from emitkit.core.logging.logger import LogContext
from emitkit.core.event.types import EventName


def emission_log_context(event: EventName, strategy: str) -> LogContext:
    """
    Build the LogContext for one emission.

    Parameters
    ----------
    event:
        The event being emitted.
    strategy:
        Name of the aggregation applied, e.g. "await_all".

    Examples
    --------
    >>> with emission_log_context("saved", "ignore_each"):
    ...     logger.info("inside")  # record has event_name="saved"
    """
    return LogContext(
        component="emitkit.event",
        operation="emit",
        event_name=str(event),
        strategy=strategy,
    )
