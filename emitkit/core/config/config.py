"""
Static configuration management for emitkit.

Purpose
-------
Provides centralized static configuration loaded from environment variables
with sensible defaults and type validation. The emitter core itself is
configuration-free; these values drive the logging subsystem.

Responsibilities
----------------
- Load configuration from environment variables with .env support
- Provide type-safe access to all static configuration values
- Record invalid values and surface them through validate()

Architecture Notes
------------------
- Singleton pattern via class methods (no instantiation)
- Auto-loads on module import via Config.reload()
- Invalid values fall back to defaults with a warning; validate() turns
  the recorded problems into a ConfigValidationError

Environment Variables
---------------------
- EMITKIT_ENV: Environment type (default: development)
- EMITKIT_LOG_LEVEL: Logging level (default: INFO)
- EMITKIT_LOG_JSON: Emit JSON logs (default: true in production)
- EMITKIT_LOG_COLORS: Colored console logs on a TTY (default: true)

Dependencies
------------
- python-dotenv: Environment variable loading
"""

import logging
import os
from enum import Enum
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from emitkit.core.config.errors import ConfigValidationError

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Environment(Enum):
    """Deployment environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """
        Parse environment string with fallback to DEVELOPMENT.

        Example
        -------
        >>> Environment.from_string("PRODUCTION") == Environment.PRODUCTION
        True
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            logger.warning(f"Unknown environment '{value}', defaulting to development")
            return cls.DEVELOPMENT


class Config:
    """
    Centralized static configuration for emitkit.

    Usage
    -----
    >>> Config.LOG_LEVEL
    'INFO'
    >>> if Config.is_production():
    ...     ...
    """

    _validation_errors: Dict[str, str] = {}
    _from_environment: Dict[str, bool] = {}

    ENVIRONMENT: Environment = Environment.DEVELOPMENT
    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None
    LOG_COLORS: bool = True

    # =========================================================================
    # Parsing helpers
    # =========================================================================

    @classmethod
    def _record_error(cls, key: str, error: str) -> None:
        cls._validation_errors[key] = error
        logger.warning(error)

    @classmethod
    def _safe_bool(cls, key: str, default: Optional[bool]) -> Optional[bool]:
        """
        Parse boolean from environment.

        Recognizes: true/false, yes/no, 1/0, on/off (case-insensitive).
        """
        raw_value = os.getenv(key)
        cls._from_environment[key] = raw_value is not None

        if raw_value is None:
            return default

        normalized = raw_value.lower().strip()
        if normalized in {"true", "yes", "1", "on"}:
            return True
        if normalized in {"false", "no", "0", "off"}:
            return False

        cls._record_error(
            key, f"{key}='{raw_value}' is not a valid boolean, using default {default}"
        )
        return default

    @classmethod
    def _safe_log_level(cls, key: str, default: str) -> str:
        raw_value = os.getenv(key)
        cls._from_environment[key] = raw_value is not None

        if raw_value is None:
            return default

        level = raw_value.strip().upper()
        if level not in _LOG_LEVELS:
            cls._record_error(
                key, f"{key}='{raw_value}' is not a valid log level, using default {default}"
            )
            return default
        return level

    @classmethod
    def _safe_environment(cls, key: str) -> Environment:
        raw_value = os.getenv(key)
        cls._from_environment[key] = raw_value is not None

        if raw_value is None:
            return Environment.DEVELOPMENT

        try:
            return Environment(raw_value.strip().lower())
        except ValueError:
            cls._record_error(
                key, f"{key}='{raw_value}' is not a known environment, using development"
            )
            return Environment.DEVELOPMENT

    # =========================================================================
    # Loading & validation
    # =========================================================================

    @classmethod
    def reload(cls) -> None:
        """Re-read every value from the environment."""
        cls._validation_errors = {}
        cls._from_environment = {}

        cls.ENVIRONMENT = cls._safe_environment("EMITKIT_ENV")
        cls.LOG_LEVEL = cls._safe_log_level("EMITKIT_LOG_LEVEL", "INFO")
        cls.LOG_JSON = cls._safe_bool("EMITKIT_LOG_JSON", None)
        cls.LOG_COLORS = bool(cls._safe_bool("EMITKIT_LOG_COLORS", True))

    @classmethod
    def validate(cls) -> None:
        """
        Raise if any environment value was rejected during loading.

        Raises
        ------
        ConfigValidationError
            With every rejected variable and its message.
        """
        if cls._validation_errors:
            raise ConfigValidationError(cls._validation_errors)

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT is Environment.PRODUCTION

    @classmethod
    def get_config_summary(cls) -> Dict[str, Any]:
        """Summary of the loaded configuration, suitable for a log record."""
        return {
            "environment": cls.ENVIRONMENT.value,
            "log_level": cls.LOG_LEVEL,
            "log_json": cls.LOG_JSON,
            "log_colors": cls.LOG_COLORS,
            "from_environment": sorted(
                key for key, loaded in cls._from_environment.items() if loaded
            ),
            "validation_errors": len(cls._validation_errors),
        }


Config.reload()
