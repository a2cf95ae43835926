"""
emitkit configuration.

Exports the static, environment-driven Config and its error types.
"""

from emitkit.core.config.config import Config, Environment
from emitkit.core.config.errors import ConfigError, ConfigValidationError

__all__ = [
    "Config",
    "Environment",
    "ConfigError",
    "ConfigValidationError",
]
