"""
Core exceptions for emitkit.

Purpose
-------
Define the exception hierarchy raised by the emitter core itself: invalid
listener registrations and broken strategy factories.

Design Notes
------------
- All emitkit exceptions inherit from `EmitterError`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict)
  - `error_code`: short, stable identifier for programmatic use
- Concrete errors also inherit from the matching builtin (`TypeError`) so
  callers that already catch the builtin keep working.
- Exceptions raised *by listeners* are never wrapped in these types. They
  propagate to the caller of `emit` unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class EmitterError(Exception):
    """
    Base exception for all emitkit errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        error_code: Optional code for programmatic handling

    Example:
        >>> raise EmitterError("Listener is not callable", {"event": "ready"})
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}"
            ")"
        )


class InvalidListenerError(EmitterError, TypeError):
    """Raised when something that is not callable is registered as a listener."""

    def __init__(self, event: Any, listener: Any) -> None:
        super().__init__(
            f"Listener for event {event!r} must be callable, "
            f"got {type(listener).__name__}",
            {"event": repr(event), "listener_type": type(listener).__name__},
        )


class StrategyFactoryError(EmitterError, TypeError):
    """Raised when a strategy factory does not produce a callable strategy."""

    def __init__(self, factory: Any, produced: Any) -> None:
        factory_name = getattr(factory, "__qualname__", None) or repr(factory)
        super().__init__(
            f"Strategy factory '{factory_name}' must return a callable, "
            f"got {type(produced).__name__}",
            {"factory": factory_name, "produced_type": type(produced).__name__},
        )


__all__ = [
    "EmitterError",
    "InvalidListenerError",
    "StrategyFactoryError",
]
