from __future__ import annotations

from datetime import timedelta
from typing import Literal, Sequence, get_args

from pydantic import BaseModel, ConfigDict, Field

LogLevel = Literal["debug", "info", "warn", "error"]
LogFormat = Literal["text", "json"]
LogOutput = Literal["stdout", "stderr"]

LOG_LEVELS: Sequence[LogLevel] = get_args(LogLevel)
LOG_FORMATS: Sequence[LogFormat] = get_args(LogFormat)
LOG_OUTPUTS: Sequence[LogOutput] = get_args(LogOutput)

ENV_LOG_LEVEL = "LOG_LEVEL"
DEFAULT_LOG_LEVEL: LogLevel = "info"

ENV_LOG_FORMAT = "LOG_FORMAT"
DEFAULT_LOG_FORMAT: LogFormat = "text"

ENV_LOG_OUTPUT = "LOG_OUTPUT"
DEFAULT_LOG_OUTPUT: LogOutput = "stdout"

# Expected format: "<host>:<port>" (e.g. "localhost:8080", ":3030").
ENV_SERVER_ADDRESS = "SERVER_ADDRESS"
DEFAULT_SERVER_ADDRESS = "localhost:8080"

ENV_SERVER_READ_TIMEOUT = "SERVER_READ_TIMEOUT"
DEFAULT_SERVER_READ_TIMEOUT = timedelta(seconds=5)

ENV_SERVER_READ_HEADER_TIMEOUT = "SERVER_READ_HEADER_TIMEOUT"
DEFAULT_SERVER_READ_HEADER_TIMEOUT = timedelta(seconds=2)

ENV_SERVER_WRITE_TIMEOUT = "SERVER_WRITE_TIMEOUT"
DEFAULT_SERVER_WRITE_TIMEOUT = timedelta(seconds=10)

ENV_SERVER_IDLE_TIMEOUT = "SERVER_IDLE_TIMEOUT"
DEFAULT_SERVER_IDLE_TIMEOUT = timedelta(seconds=60)

ENV_SERVER_SHUTDOWN_TIMEOUT = "SERVER_SHUTDOWN_TIMEOUT"
DEFAULT_SERVER_SHUTDOWN_TIMEOUT = timedelta(seconds=15)


class LogSettings(BaseModel):
    """Logging subsystem settings: severity, encoding and destination stream."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: LogLevel = DEFAULT_LOG_LEVEL
    format: LogFormat = DEFAULT_LOG_FORMAT
    output: LogOutput = DEFAULT_LOG_OUTPUT


class ServerSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    # TCP address to listen on, "host:port".
    address: str = DEFAULT_SERVER_ADDRESS

    # Maximum duration for reading the entire request, including the body.
    read_timeout: timedelta = DEFAULT_SERVER_READ_TIMEOUT
    # Time allowed to read request headers.
    read_header_timeout: timedelta = DEFAULT_SERVER_READ_HEADER_TIMEOUT
    # Maximum duration before timing out writes of the response.
    write_timeout: timedelta = DEFAULT_SERVER_WRITE_TIMEOUT
    # Time to wait for the next request when keep-alives are enabled.
    idle_timeout: timedelta = DEFAULT_SERVER_IDLE_TIMEOUT
    # Grace period for active connections to close during shutdown.
    shutdown_timeout: timedelta = DEFAULT_SERVER_SHUTDOWN_TIMEOUT


class AppConfig(BaseModel):
    """
    Immutable application configuration resolved from the environment.

    Built once per load pass and never mutated afterwards, so a single
    instance can be shared freely between the server and logging setup.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    log: LogSettings = Field(default_factory=LogSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
