"""Logging setup for Scripture Pal.

Installs a stderr handler, an optional file handler and a bounded in-memory
buffer of recent records that the service exposes for debugging.
"""
import json
import logging
import sys
from collections import deque
from datetime import datetime
from typing import Any, Optional

from engine.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LOG_FORMAT_NO_TIME = "[%(name)s] %(levelname)s: %(message)s"

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def resolve_level(name: str) -> int:
    """Map a configured level name to a logging level. Unknown names mean INFO."""
    return _LEVELS.get(name.lower(), logging.INFO)


class RecentLogBuffer(logging.Handler):
    """Keeps the last `max_entries` records as plain dicts."""

    def __init__(self, max_entries: int = 1000, include_context: bool = False):
        super().__init__()
        self.include_context = include_context
        self._entries: deque[dict[str, Any]] = deque(maxlen=max(max_entries, 1))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry: dict[str, Any] = {
                "timestamp": datetime.fromtimestamp(record.created).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            if self.include_context:
                entry["context"] = {
                    "module": record.module,
                    "function": record.funcName,
                    "line": record.lineno,
                }
            self._entries.append(entry)
        except Exception:
            self.handleError(record)

    def entries(self, last_n: Optional[int] = None) -> list[dict[str, Any]]:
        """Return recent entries, oldest first.

        Args:
            last_n: Number of most recent entries to return. None means all.
        """
        items = list(self._entries)
        if last_n is None:
            return items
        if last_n <= 0:
            return []
        return items[-last_n:]

    def dumps(self, last_n: Optional[int] = None) -> str:
        """Recent entries as JSON lines."""
        return "\n".join(json.dumps(e) for e in self.entries(last_n))

    def clear(self) -> None:
        self._entries.clear()


_installed: list[logging.Handler] = []


def configure_logging(config: LoggingConfig) -> RecentLogBuffer:
    """Configure the root logger from LoggingConfig and return the recent-log buffer.

    Calling this again replaces the handlers it installed before. With logging
    disabled only warnings and errors are emitted.
    """
    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    level = resolve_level(config.level) if config.enabled else logging.WARNING
    formatter = logging.Formatter(LOG_FORMAT if config.include_timestamp else LOG_FORMAT_NO_TIME)

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    _installed.append(stream)

    if config.enabled and config.log_to_file:
        file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        _installed.append(file_handler)

    buffer = RecentLogBuffer(config.max_log_size, include_context=config.include_context)
    _installed.append(buffer)

    for handler in _installed:
        root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger(__name__).debug(
        "Logging configured (enabled=%s, level=%s, file=%s)",
        config.enabled,
        config.level,
        config.log_file if config.log_to_file else None,
    )
    return buffer
