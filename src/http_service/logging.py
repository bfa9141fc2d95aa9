from __future__ import annotations

import logging
import sys
from typing import Dict, Optional, TextIO

import structlog

from http_service.config.models import LogFormat, LogLevel, LogOutput, LogSettings

_LEVELS: Dict[LogLevel, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_installed_handler: Optional[logging.Handler] = None


def _stream_for(output: LogOutput) -> TextIO:
    if output == "stderr":
        return sys.stderr
    return sys.stdout


def _formatter_for(fmt: LogFormat) -> logging.Formatter:
    if fmt == "json":
        return structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                structlog.processors.format_exc_info,
            ],
        )
    return logging.Formatter(_TEXT_FORMAT)


def init_logging(settings: LogSettings) -> logging.Handler:
    """
    Configure the root logger from the resolved log settings.

    Calling this again replaces the handler installed by the previous call,
    leaving any other root handlers untouched.
    """
    global _installed_handler

    handler = logging.StreamHandler(_stream_for(settings.output))
    handler.setFormatter(_formatter_for(settings.format))

    root = logging.getLogger()
    if _installed_handler is not None:
        root.removeHandler(_installed_handler)
    root.addHandler(handler)
    root.setLevel(_LEVELS[settings.level])
    _installed_handler = handler
    return handler
