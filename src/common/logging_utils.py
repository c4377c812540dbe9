"""Centralized logging helpers.

Every entry point calls configure_logging() once; library modules only ask for
``logging.getLogger(__name__)`` and attach structured context to DEBUG records
through extra_context().
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from constants import Constants

_CONTEXT_KEYS = ("event", "component", "action", "target", "outcome")
_HANDLER_MARK = "_nodecache_handler"


def _resolve_level(default: str = "INFO") -> int:
    name = os.environ.get(Constants.LOG_LEVEL_ENV, default).strip().upper()
    level = getattr(logging, name, None)
    return level if isinstance(level, int) else logging.INFO


class _ContextFormatter(logging.Formatter):
    """Append structured context to DEBUG records that carry it."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        if record.levelno > logging.DEBUG:
            return base
        ctx = getattr(record, "context_fields", None)
        if not ctx:
            return base
        pairs = " ".join(f"{k}={v}" for k, v in ctx.items())
        return f"{base} [{pairs}]"


def configure_logging(log_file: Optional[str] = None, quiet: bool = False) -> None:
    """Configure the root logger for CLI use.

    Args:
        log_file: Optional path for an additional file handler.
        quiet: Only report errors on the console.
    """
    root = logging.getLogger()
    # Replace only handlers installed by a previous call
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    root.setLevel(_resolve_level())

    console = logging.StreamHandler()
    console.setFormatter(_ContextFormatter(Constants.LOG_FORMAT))
    if quiet:
        console.setLevel(logging.ERROR)
    setattr(console, _HANDLER_MARK, True)
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(_ContextFormatter(Constants.LOG_FILE_FORMAT))
        setattr(file_handler, _HANDLER_MARK, True)
        root.addHandler(file_handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted for this logger."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured DEBUG record.

    Known keys (event, component, action, target, outcome) come first; any other
    non-None field is appended in call order.
    """
    ordered: Dict[str, Any] = {}
    for key in _CONTEXT_KEYS:
        if fields.get(key) is not None:
            ordered[key] = fields[key]
    for key, value in fields.items():
        if key not in ordered and value is not None:
            ordered[key] = value
    return {"context_fields": ordered}


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
