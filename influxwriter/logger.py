"""Library-wide logging with four levels and a replaceable logger."""

from __future__ import annotations

import sys
import threading
from enum import IntEnum
from typing import IO, Any, Protocol


class LogLevel(IntEnum):
    """Logging levels; each level also logs every level below it."""

    ERROR = 0
    WARNING = 1
    INFO = 2
    DEBUG = 3


class _LoggerLike(Protocol):
    level: int

    def debug(self, msg: str, *args: Any) -> None: ...

    def info(self, msg: str, *args: Any) -> None: ...

    def warn(self, msg: str, *args: Any) -> None: ...

    def error(self, msg: str, *args: Any) -> None: ...


_REQUIRED_METHODS = ("debug", "info", "warn", "error")


class Logger:
    """Default logger writing ``<prefix> <tag>! <message>`` lines to a stream.

    Messages use %-style formatting when arguments are given.
    The stream defaults to ``sys.stderr`` at the moment of writing.
    """

    def __init__(
        self,
        prefix: str = "influxdb2client",
        level: int = LogLevel.ERROR,
        stream: IO[str] | None = None,
    ) -> None:
        self.prefix = prefix
        self.level = LogLevel(level)
        self.stream = stream
        self._lock = threading.Lock()

    def _emit(self, tag: str, msg: str, args: tuple[Any, ...]) -> None:
        text = msg % args if args else msg
        with self._lock:
            stream = self.stream if self.stream is not None else sys.stderr
            stream.write(f"{self.prefix} {tag}! {text}\n")

    def debug(self, msg: str, *args: Any) -> None:
        """Log a debug message if the level allows it."""
        if self.level >= LogLevel.DEBUG:
            self._emit("D", msg, args)

    def info(self, msg: str, *args: Any) -> None:
        """Log an info message if the level allows it."""
        if self.level >= LogLevel.INFO:
            self._emit("I", msg, args)

    def warn(self, msg: str, *args: Any) -> None:
        """Log a warning if the level allows it."""
        if self.level >= LogLevel.WARNING:
            self._emit("W", msg, args)

    def error(self, msg: str, *args: Any) -> None:
        """Log an error; errors are always written."""
        self._emit("E", msg, args)


class _Registry:
    """Holds the library-wide logger behind a lock."""

    def __init__(self, logger: _LoggerLike | None) -> None:
        self._logger = logger
        self._lock = threading.Lock()

    @property
    def logger(self) -> _LoggerLike | None:
        with self._lock:
            return self._logger

    def replace(self, logger: _LoggerLike | None) -> _LoggerLike | None:
        if logger is not None:
            missing = [
                name
                for name in _REQUIRED_METHODS
                if not callable(getattr(logger, name, None))
            ]
            if missing:
                raise TypeError(
                    f"logger lacks required methods: {', '.join(missing)}"
                )
        with self._lock:
            previous, self._logger = self._logger, logger
        return previous


_registry = _Registry(Logger())


def set_logger(logger: _LoggerLike | None) -> _LoggerLike | None:
    """Replace the library-wide logger and return the previous one.

    ``None`` disables logging. Raises ``TypeError`` if the logger lacks
    any of the ``debug``, ``info``, ``warn`` or ``error`` methods.
    """
    return _registry.replace(logger)


def get_logger() -> _LoggerLike | None:
    """Return the library-wide logger, or ``None`` if logging is disabled."""
    return _registry.logger


def debug(msg: str, *args: Any) -> None:
    """Log a debug message through the library-wide logger."""
    current = _registry.logger
    if current is not None:
        current.debug(msg, *args)


def info(msg: str, *args: Any) -> None:
    """Log an info message through the library-wide logger."""
    current = _registry.logger
    if current is not None:
        current.info(msg, *args)


def warn(msg: str, *args: Any) -> None:
    """Log a warning through the library-wide logger."""
    current = _registry.logger
    if current is not None:
        current.warn(msg, *args)


def error(msg: str, *args: Any) -> None:
    """Log an error through the library-wide logger."""
    current = _registry.logger
    if current is not None:
        current.error(msg, *args)


def level() -> LogLevel:
    """Return the current level of the library-wide logger."""
    current = _registry.logger
    if current is not None:
        return LogLevel(current.level)
    return LogLevel.ERROR