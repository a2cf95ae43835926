"""
Core infrastructure layer for emitkit.

Purpose
-------
Group the subsystems the emitter core is built on:

- Event system (Emitter, ListenerRegistry, strategies)
- Configuration (Config)
- Logging (structured logging, logger factory)
- Exceptions (EmitterError hierarchy)

This module is intentionally thin: no logic, no configuration, no I/O.
"""

from emitkit.core.exceptions import (
    EmitterError,
    InvalidListenerError,
    StrategyFactoryError,
)

__all__ = [
    "EmitterError",
    "InvalidListenerError",
    "StrategyFactoryError",
]
