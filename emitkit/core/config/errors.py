"""
Configuration error hierarchy for emitkit.

Exception Hierarchy
-------------------
ConfigError (base)
└── ConfigValidationError (invalid environment values)
"""


class ConfigError(Exception):
    """
    Base exception for all configuration-related errors.

    Example
    -------
    >>> try:
    ...     Config.validate()
    ... except ConfigError as e:
    ...     logger.error(f"Config check failed: {e}")
    """


class ConfigValidationError(ConfigError):
    """
    Raised when configuration validation fails.

    This exception is raised when:
    - An environment value cannot be parsed (bad boolean, unknown level)
    - An environment name is not one of the known environments

    Attributes
    ----------
    errors:
        Mapping of environment variable name to the validation message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        joined = "; ".join(f"{key}: {msg}" for key, msg in sorted(self.errors.items()))
        super().__init__(f"Invalid configuration: {joined}")


__all__ = [
    "ConfigError",
    "ConfigValidationError",
]
