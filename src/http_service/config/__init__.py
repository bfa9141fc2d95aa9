"""Environment-driven configuration: typed loading, validation and error aggregation."""

from http_service.config.durations import format_duration, parse_duration
from http_service.config.errors import (
    ConfigError,
    ConstraintError,
    FieldError,
    FieldParseError,
    InvalidKeyError,
    MissingFieldError,
)
from http_service.config.interfaces import ConfigLoader, Lookup
from http_service.config.loader import EnvConfigLoader, EnvLoader, environ_lookup, load_config, mapping_lookup
from http_service.config.models import AppConfig, LogSettings, ServerSettings

__all__ = [
    "AppConfig",
    "ConfigError",
    "ConfigLoader",
    "ConstraintError",
    "EnvConfigLoader",
    "EnvLoader",
    "FieldError",
    "FieldParseError",
    "InvalidKeyError",
    "Lookup",
    "LogSettings",
    "MissingFieldError",
    "ServerSettings",
    "environ_lookup",
    "format_duration",
    "load_config",
    "mapping_lookup",
    "parse_duration",
]
