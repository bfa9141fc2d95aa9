from __future__ import annotations

import logging
import os
import re
from datetime import timedelta
from typing import List, Mapping, Optional, Sequence, Tuple, TypeVar

from http_service.config.durations import parse_duration
from http_service.config.errors import (
    ConfigError,
    ConstraintError,
    FieldError,
    FieldParseError,
    InvalidKeyError,
    MissingFieldError,
)
from http_service.config.interfaces import Lookup
from http_service.config.models import (
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_OUTPUT,
    DEFAULT_SERVER_ADDRESS,
    DEFAULT_SERVER_IDLE_TIMEOUT,
    DEFAULT_SERVER_READ_HEADER_TIMEOUT,
    DEFAULT_SERVER_READ_TIMEOUT,
    DEFAULT_SERVER_SHUTDOWN_TIMEOUT,
    DEFAULT_SERVER_WRITE_TIMEOUT,
    ENV_LOG_FORMAT,
    ENV_LOG_LEVEL,
    ENV_LOG_OUTPUT,
    ENV_SERVER_ADDRESS,
    ENV_SERVER_IDLE_TIMEOUT,
    ENV_SERVER_READ_HEADER_TIMEOUT,
    ENV_SERVER_READ_TIMEOUT,
    ENV_SERVER_SHUTDOWN_TIMEOUT,
    ENV_SERVER_WRITE_TIMEOUT,
    LOG_FORMATS,
    LOG_LEVELS,
    LOG_OUTPUTS,
    AppConfig,
    LogSettings,
    ServerSettings,
)

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=str)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_TRUE_TOKENS = frozenset({"1", "t", "true"})
_FALSE_TOKENS = frozenset({"0", "f", "false"})


def mapping_lookup(values: Mapping[str, str]) -> Lookup:
    """Wrap an in-memory mapping (or os.environ) as a lookup."""
    return values.get


def environ_lookup() -> Lookup:
    return mapping_lookup(os.environ)


class EnvLoader:
    """
    Reads environment variables into typed values for a single load pass.

    Every accessor falls back to its default when the variable is unset or
    invalid. Invalid values are recorded instead of raised, so that one pass
    reports every problem; call err() once all fields have been read.
    """

    def __init__(self, lookup: Optional[Lookup]) -> None:
        self._lookup = lookup
        self._errors: List[FieldError] = []

    @property
    def errors(self) -> Sequence[FieldError]:
        return tuple(self._errors)

    def err(self) -> Optional[ConfigError]:
        if not self._errors:
            return None
        return ConfigError(self._errors)

    def _record(self, error: FieldError) -> None:
        logger.debug("config.invalid_field env=%s error=%s", error.key, error)
        self._errors.append(error)

    def get(self, key: str) -> Tuple[str, bool]:
        if not key:
            self._record(InvalidKeyError())
            return "", False
        if self._lookup is None:
            return "", False
        raw = self._lookup(key)
        if raw is None:
            return "", False
        value = raw.strip()
        return value, value != ""

    def string(self, key: str, default: str) -> str:
        value, present = self.get(key)
        return value if present else default

    def required_string(self, key: str) -> str:
        value, present = self.get(key)
        if not present:
            if key:
                self._record(MissingFieldError(key))
            return ""
        return value

    def integer(self, key: str, default: int) -> int:
        value, present = self.get(key)
        if not present:
            return default
        if _INTEGER.fullmatch(value) is None:
            self._record(FieldParseError(key, value, "integer", "not a base-10 integer"))
            return default
        return int(value)

    def boolean(self, key: str, default: bool) -> bool:
        value, present = self.get(key)
        if not present:
            return default
        token = value.lower()
        if token in _TRUE_TOKENS:
            return True
        if token in _FALSE_TOKENS:
            return False
        self._record(FieldParseError(key, value, "boolean", "expected one of 1, t, true, 0, f, false"))
        return default

    def _parse_duration(self, key: str) -> Tuple[Optional[timedelta], str]:
        value, present = self.get(key)
        if not present:
            return None, value
        try:
            return parse_duration(value), value
        except ValueError as exc:
            error = FieldParseError(key, value, "duration", str(exc))
            error.__cause__ = exc
            self._record(error)
            return None, value

    def duration(self, key: str, default: timedelta) -> timedelta:
        parsed, _ = self._parse_duration(key)
        return default if parsed is None else parsed

    def positive_duration(self, key: str, default: timedelta) -> timedelta:
        parsed, raw = self._parse_duration(key)
        if parsed is None:
            return default
        if parsed <= timedelta(0):
            self._record(ConstraintError(key, raw, "must be positive"))
            return default
        return parsed

    def non_negative_duration(self, key: str, default: timedelta) -> timedelta:
        parsed, raw = self._parse_duration(key)
        if parsed is None:
            return default
        if parsed < timedelta(0):
            self._record(ConstraintError(key, raw, "must be non-negative"))
            return default
        return parsed

    def one_of(self, key: str, default: S, allowed: Sequence[S]) -> S:
        """Return the member of `allowed` matching the value case-insensitively."""
        value, present = self.get(key)
        if not present:
            return default
        folded = value.casefold()
        for member in allowed:
            if member.casefold() == folded:
                return member
        self._record(ConstraintError(key, value, f"allowed={', '.join(allowed)}"))
        return default


def _load_log(loader: EnvLoader) -> LogSettings:
    return LogSettings(
        level=loader.one_of(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL, LOG_LEVELS),
        format=loader.one_of(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT, LOG_FORMATS),
        output=loader.one_of(ENV_LOG_OUTPUT, DEFAULT_LOG_OUTPUT, LOG_OUTPUTS),
    )


def _load_server(loader: EnvLoader) -> ServerSettings:
    return ServerSettings(
        address=loader.string(ENV_SERVER_ADDRESS, DEFAULT_SERVER_ADDRESS),
        read_timeout=loader.positive_duration(ENV_SERVER_READ_TIMEOUT, DEFAULT_SERVER_READ_TIMEOUT),
        read_header_timeout=loader.positive_duration(
            ENV_SERVER_READ_HEADER_TIMEOUT, DEFAULT_SERVER_READ_HEADER_TIMEOUT
        ),
        write_timeout=loader.positive_duration(ENV_SERVER_WRITE_TIMEOUT, DEFAULT_SERVER_WRITE_TIMEOUT),
        idle_timeout=loader.positive_duration(ENV_SERVER_IDLE_TIMEOUT, DEFAULT_SERVER_IDLE_TIMEOUT),
        shutdown_timeout=loader.non_negative_duration(
            ENV_SERVER_SHUTDOWN_TIMEOUT, DEFAULT_SERVER_SHUTDOWN_TIMEOUT
        ),
    )


def load_config(lookup: Optional[Lookup]) -> Tuple[AppConfig, Optional[ConfigError]]:
    """
    Resolve the full configuration from `lookup` in one pass.

    The returned config is always complete: fields that were unset or
    invalid hold their defaults. The second element is None when every
    field resolved cleanly, otherwise it joins all recorded failures.
    Whether to abort on that error is the caller's decision.
    """
    loader = EnvLoader(lookup)
    config = AppConfig(log=_load_log(loader), server=_load_server(loader))
    err = loader.err()
    if err is None:
        logger.debug("config.loaded")
    else:
        logger.debug("config.loaded_with_errors count=%s keys=%s", len(err), ",".join(err.keys))
    return config, err


class EnvConfigLoader:
    def __init__(self, lookup: Optional[Lookup] = None) -> None:
        self._lookup = lookup if lookup is not None else environ_lookup()

    def load_with_errors(self) -> Tuple[AppConfig, Optional[ConfigError]]:
        return load_config(self._lookup)

    def load(self) -> AppConfig:
        config, err = self.load_with_errors()
        if err is not None:
            raise err
        return config
