"""
emitkit Logging Subsystem

Purpose
-------
Provide the structured logging used throughout emitkit:

- Structured JSON logs for aggregation and analysis.
- LogContext-based propagation of emission context via ContextVars, so
  records logged from inside a listener carry the event being emitted.
- Console output: JSON in production, colored human text in dev.

Design Decisions
----------------
- JSONFormatter is the canonical representation.
- ContextFilter uses ContextVars to safely enrich logs in async code.
- Extra fields passed via `logger.info("msg", extra={...})` are merged into JSON.
- Nothing is configured at import time. emitkit is a library; applications
  opt in with setup_logging().

Dependencies
------------
- emitkit.core.config.config.Config
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from datetime import datetime, timezone
from logging import Logger
from typing import Any, Dict, Optional

from emitkit.core.config.config import Config


# ============================================================================
# Emission Context (ContextVars)
# ============================================================================

_log_context: ContextVar[Dict[str, Any]] = ContextVar(
    "emitkit_log_context",
    default={},
)


# ============================================================================
# Config / Environment
# ============================================================================


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Configuration for the logging subsystem."""

    CONSOLE_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
    DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    @property
    def environment(self) -> str:
        return Config.ENVIRONMENT.value

    @property
    def log_level(self) -> int:
        return getattr(logging, Config.LOG_LEVEL, logging.INFO)

    @property
    def use_json(self) -> bool:
        if Config.LOG_JSON is None:
            return Config.is_production()
        return Config.LOG_JSON

    @property
    def use_colors(self) -> bool:
        if self.use_json:
            return False
        return Config.LOG_COLORS and sys.stdout.isatty()


LOGGER_CONFIG = LoggerConfig()


# ============================================================================
# Filters & Formatters
# ============================================================================


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context: Dict[str, Any] = _log_context.get()

        record.event_name = context.get("event_name", "N/A")
        record.strategy = context.get("strategy", "N/A")
        record.correlation_id = context.get("correlation_id", "N/A")
        record.component = context.get("component") or record.name.split(".", 1)[0]
        record.operation = context.get("operation", "N/A")

        return True


class ColoredFormatter(logging.Formatter):
    """Console formatter tinting the level name. The record is left unchanged."""

    LEVEL_COLORS: Dict[int, str] = {
        logging.DEBUG: "\033[90m",
        logging.INFO: "\033[94m",
        logging.WARNING: "\033[93m",
        logging.ERROR: "\033[91m",
        logging.CRITICAL: "\033[1;91m",
    }
    RESET = "\033[0m"

    def formatMessage(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        line = super().formatMessage(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return line
        return line.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)


# Attributes every LogRecord has; anything else came in through `extra`.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Emission context fields sit at the top level (omitted outside an
    emission); `extra` fields are nested under "extra". Values json cannot
    encode are rendered with repr().
    """

    CONTEXT_ATTRS = ("event_name", "strategy", "correlation_id", "component", "operation")

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        payload.update(
            (attr, getattr(record, attr))
            for attr in self.CONTEXT_ATTRS
            if getattr(record, attr, "N/A") not in (None, "N/A")
        )

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in self.CONTEXT_ATTRS
            and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, ensure_ascii=False, default=repr)


# ============================================================================
# Global Setup
# ============================================================================


def _build_console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(LOGGER_CONFIG.log_level)

    if LOGGER_CONFIG.use_json:
        handler.setFormatter(JSONFormatter())
    elif LOGGER_CONFIG.use_colors:
        handler.setFormatter(
            ColoredFormatter(
                fmt=LOGGER_CONFIG.CONSOLE_FORMAT,
                datefmt=LOGGER_CONFIG.DATE_FORMAT,
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt=LOGGER_CONFIG.CONSOLE_FORMAT,
                datefmt=LOGGER_CONFIG.DATE_FORMAT,
            )
        )

    handler.addFilter(ContextFilter())
    return handler


def setup_logging() -> None:
    """Attach the emitkit console handler to the ``emitkit`` logger. Idempotent."""
    package_logger = logging.getLogger("emitkit")

    if getattr(package_logger, "_emitkit_logging_initialized", False):
        return

    package_logger.setLevel(LOGGER_CONFIG.log_level)
    package_logger.addHandler(_build_console_handler())
    setattr(package_logger, "_emitkit_logging_initialized", True)

    package_logger.info(
        "Logging initialized",
        extra={
            "environment": LOGGER_CONFIG.environment,
            "log_level": logging.getLevelName(LOGGER_CONFIG.log_level),
            "json": LOGGER_CONFIG.use_json,
            "colors": LOGGER_CONFIG.use_colors,
        },
    )


def shutdown_logging() -> None:
    package_logger = logging.getLogger("emitkit")

    if not getattr(package_logger, "_emitkit_logging_initialized", False):
        return

    for handler in list(package_logger.handlers):
        try:
            handler.flush()
            handler.close()
        finally:
            package_logger.removeHandler(handler)

    package_logger.setLevel(logging.NOTSET)
    setattr(package_logger, "_emitkit_logging_initialized", False)


# ============================================================================
# Public API
# ============================================================================


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


def get_log_context() -> Dict[str, Any]:
    return dict(_log_context.get())


class LogContext:
    """
    Scoped logging context. Works as a sync and an async context manager.

    Fields given here are layered over the current context and restored on
    exit, so nested emissions see their own event name and the outer one
    comes back afterwards. Fields left as None keep the outer value, and the
    correlation id is inherited from the outer context (a new one is only
    generated at the outermost level).
    """

    def __init__(
        self,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        fields = {
            "component": component,
            "operation": operation,
            "correlation_id": correlation_id,
            **extra,
        }
        self.context: Dict[str, Any] = {
            key: value for key, value in fields.items() if value is not None
        }
        self._token: Optional[Token[Dict[str, Any]]] = None

    @staticmethod
    def _generate_correlation_id() -> str:
        return str(uuid.uuid4())[:8]

    def __enter__(self) -> "LogContext":
        merged = {**_log_context.get(), **self.context}
        if not merged.get("correlation_id"):
            merged["correlation_id"] = self._generate_correlation_id()
        self._token = _log_context.set(merged)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None

    async def __aenter__(self) -> "LogContext":
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


def set_log_context(
    component: Optional[str] = None,
    operation: Optional[str] = None,
    correlation_id: Optional[str] = None,
    **extra: Any,
) -> None:
    current = _log_context.get().copy()

    if component is not None:
        current["component"] = component
    if operation is not None:
        current["operation"] = operation
    if correlation_id:
        current["correlation_id"] = correlation_id

    current.update(extra)
    _log_context.set(current)


def clear_log_context() -> None:
    _log_context.set({})
