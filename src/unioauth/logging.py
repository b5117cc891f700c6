"""Logging port and logging setup for unioauth.

Clients report recoverable failures through an injected ``LogSink`` before
surfacing them as exceptions. The sink is advisory only; the default is a
no-op. Library internals additionally log through module loggers.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

NOISY_HTTP_LOGGERS = (
    "httpx",
    "httpcore",
    "httpcore.http11",
    "httpcore.connection",
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LogLevel(str, enum.Enum):
    """Severity levels understood by a LogSink."""

    DEBUG = "debug"
    ERROR = "error"


@runtime_checkable
class LogSink(Protocol):
    """Structured logging port injected into clients."""

    def log(self, level: LogLevel, message: str) -> None: ...


class NullLogSink:
    """Discards every message."""

    def log(self, level: LogLevel, message: str) -> None:
        return None


class LoggerLogSink:
    """Forwards messages to a stdlib logger."""

    _LEVELS = {LogLevel.DEBUG: logging.DEBUG, LogLevel.ERROR: logging.ERROR}

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("unioauth")

    def log(self, level: LogLevel, message: str) -> None:
        self.logger.log(self._LEVELS[LogLevel(level)], "%s", message)


class CallbackLogSink:
    """Adapts a plain ``func(message, level)`` callable to the LogSink port.

    The level is passed as its string value (``"debug"`` or ``"error"``).
    """

    def __init__(self, callback: Callable[[str, str], object]) -> None:
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {type(callback).__name__}")
        self.callback = callback

    def log(self, level: LogLevel, message: str) -> None:
        self.callback(message, LogLevel(level).value)


def as_log_sink(sink: LogSink | Callable[[str, str], object] | None) -> LogSink:
    """Normalize whatever the caller injected into a LogSink."""
    if sink is None:
        return NullLogSink()
    # Logger.log() takes an int level, so it structurally matches but cannot serve
    if isinstance(sink, logging.Logger):
        return LoggerLogSink(sink)
    if isinstance(sink, LogSink):
        return sink
    return CallbackLogSink(sink)


def set_noisy_http_logger_levels(current_log_level: str) -> None:
    """Ensure HTTP client noise only surfaces at DEBUG level."""

    noisy_level = logging.DEBUG if current_log_level == "DEBUG" else logging.WARNING
    for logger_name in NOISY_HTTP_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)


def configure_logging(level: str = "INFO") -> str:
    """Configure root logging for command-line use.

    Only the first word of ``level`` is considered so values like
    ``"DEBUG  # verbose"`` copied from .env files still work. Unknown levels
    fall back to INFO.

    Returns:
        The effective level name
    """
    parts = level.split()
    effective = parts[0].upper() if parts else "INFO"
    if effective not in VALID_LOG_LEVELS:
        effective = "INFO"

    logging.basicConfig(
        level=getattr(logging, effective),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(getattr(logging, effective))
    set_noisy_http_logger_levels(effective)
    return effective


__all__ = [
    "LogLevel",
    "LogSink",
    "NullLogSink",
    "LoggerLogSink",
    "CallbackLogSink",
    "as_log_sink",
    "configure_logging",
    "set_noisy_http_logger_levels",
    "NOISY_HTTP_LOGGERS",
]
