"""Process-wide logger writing to standard error and an optional log file."""

from __future__ import annotations

import sys
import threading
import time
from enum import IntEnum
from pathlib import Path
from typing import IO, ClassVar, Optional, Union


class LogLevel(IntEnum):
    """Severity of a log message; higher is more severe."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3


class Logger:
    """Thread-safe logger; messages below the current level are dropped."""

    _instance: ClassVar[Optional["Logger"]] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._level = LogLevel.INFO
        self._file: Optional[IO[str]] = None

    @classmethod
    def instance(cls) -> "Logger":
        """Return the shared logger, creating it on first use."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @property
    def level(self) -> LogLevel:
        return self._level

    def set_level(self, level: LogLevel) -> None:
        with self._lock:
            self._level = LogLevel(level)

    def set_log_file(self, path: Union[str, Path]) -> None:
        """Append subsequent messages to ``path`` as well as standard error."""
        with self._lock:
            self._close_file()
            self._file = open(path, "a", encoding="utf-8")

    def close(self) -> None:
        """Stop writing to the log file, if one is open."""
        with self._lock:
            self._close_file()

    def log(self, level: LogLevel, message: str) -> None:
        if level < self._level:
            return
        line = f"[{time.strftime('%Y-%m-%d %H:%M:%S')}] [{LogLevel(level).name}] {message}"
        with self._lock:
            print(line, file=sys.stderr, flush=True)
            if self._file is not None:
                self._file.write(line + "\n")
                self._file.flush()

    def _close_file(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


def log_debug(message: str) -> None:
    Logger.instance().log(LogLevel.DEBUG, message)


def log_info(message: str) -> None:
    Logger.instance().log(LogLevel.INFO, message)


def log_warn(message: str) -> None:
    Logger.instance().log(LogLevel.WARN, message)


def log_error(message: str) -> None:
    Logger.instance().log(LogLevel.ERROR, message)