"""Structured logging setup.

All modules log through structlog with dotted event names and keyword
fields. Secret-bearing values are redacted before rendering so stored
credentials never reach the log stream.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any, TextIO

import structlog

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

_SECRET_KEYS = ("password", "credential", "secret", "token")
_SECRET_TEXT_RE = re.compile(
    r"(?i)\b(password|passwd|secret|token)(\s*[=:]\s*)(\S+)"
)
_REDACTED = "[REDACTED]"

_min_level = logging.INFO


def _truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _level_value(value: str | None, *, default: str = "info") -> int:
    if not value:
        return _LEVELS[default]
    return _LEVELS.get(value.strip().lower(), _LEVELS[default])


def _is_secret_key(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    lowered = key.lower()
    return any(marker in lowered for marker in _SECRET_KEYS)


def _redact_text(text: str) -> str:
    return _SECRET_TEXT_RE.sub(lambda m: f"{m.group(1)}{m.group(2)}{_REDACTED}", text)


def _redact_value(value: Any, seen: dict[int, Any]) -> Any:
    if isinstance(value, str):
        return _redact_text(value)
    if isinstance(value, bytes):
        return _redact_text(value.decode("utf-8", errors="replace"))
    marker = id(value)
    if marker in seen:
        return seen[marker]
    if isinstance(value, dict):
        result: dict[Any, Any] = {}
        seen[marker] = result
        for key, item in value.items():
            result[key] = _REDACTED if _is_secret_key(key) else _redact_value(item, seen)
        return result
    if isinstance(value, list):
        return [_redact_value(item, seen) for item in value]
    if isinstance(value, tuple):
        return tuple(_redact_value(item, seen) for item in value)
    if isinstance(value, set):
        return {_redact_value(item, seen) for item in value}
    return value


def _redact_event(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    seen: dict[int, Any] = {}
    for key in list(event_dict.keys()):
        if _is_secret_key(key):
            event_dict[key] = _REDACTED
        else:
            event_dict[key] = _redact_value(event_dict[key], seen)
    return event_dict


def _drop_below_level(
    _logger: Any, method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    if _LEVELS.get(method, logging.INFO) < _min_level:
        raise structlog.DropEvent
    return event_dict


class SafeWriter:
    """File-like wrapper that stops writing once the stream goes away."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._closed = False

    def write(self, text: str) -> int:
        if self._closed:
            return 0
        try:
            return self._stream.write(text)
        except (ValueError, OSError):
            self._closed = True
            return 0

    def flush(self) -> None:
        if self._closed:
            return
        try:
            self._stream.flush()
        except (ValueError, OSError):
            self._closed = True

    def isatty(self) -> bool:
        try:
            return self._stream.isatty()
        except (ValueError, OSError):
            return False


def setup_logging(
    *,
    debug: bool | None = None,
    level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for the process.

    Args:
        debug: Force debug level. Defaults to the TWEETSPY_DEBUG env var.
        level: Level name. Defaults to the TWEETSPY_LOG_LEVEL env var.
        stream: Output stream, stderr by default.
    """
    global _min_level
    if debug is None:
        debug = _truthy(os.environ.get("TWEETSPY_DEBUG"))
    if level is None:
        level = os.environ.get("TWEETSPY_LOG_LEVEL")
    _min_level = logging.DEBUG if debug else _level_value(level)

    writer = SafeWriter(stream or sys.stderr)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _drop_below_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _redact_event,
            structlog.dev.ConsoleRenderer(colors=writer.isatty()),
        ],
        logger_factory=structlog.PrintLoggerFactory(file=writer),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(name)


def bind_dispatch_context(*, identity: str, command: str) -> None:
    structlog.contextvars.bind_contextvars(identity=identity, command=command)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def suppress_logs(level: str = "critical") -> Iterator[None]:
    """Temporarily raise the minimum level for emitted events."""
    global _min_level
    previous = _min_level
    _min_level = max(previous, _level_value(level, default="critical"))
    try:
        yield
    finally:
        _min_level = previous
