"""Logging setup for brandlattice.

Human-readable lines by default, or one JSON object per record for log
shippers. Output goes to stderr (or a file) so that reports printed by the
CLI on stdout stay machine-readable.
"""

from __future__ import annotations

import functools
import json
import logging
import sys
import time
from datetime import UTC, datetime
from typing import Any

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else arrived through `extra=`
# or a LoggerAdapter and belongs in the structured context.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class StructuredJSONFormatter(logging.Formatter):
    """Render records as single-line JSON.

    Output shape::

        {
            "timestamp": "2026-01-29T12:00:00.000000+00:00",
            "level": "WARNING",
            "logger": "brandlattice.core.validation.predicates",
            "message": "...",
            "location": {"module": "...", "function": "...", "line": 42},
            "context": {...extra fields...},
            "error": {"type": "...", "message": "...", "traceback": "..."}
        }

    ``context`` and ``error`` are present only when there is something to put
    in them.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "module": record.module,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            entry["error"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": record.exc_text or self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)


def _build_handler(filename: str | None) -> logging.Handler:
    if filename:
        return logging.FileHandler(filename, encoding="utf-8")
    return logging.StreamHandler(sys.stderr)


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Install a single root handler, replacing any previous configuration.

    Args:
        level: Level name, case-insensitive
        format_string: Line format; defaults to DEFAULT_FORMAT. Ignored when
            ``structured`` is set.
        filename: Log file; stderr when None
        structured: Emit JSON lines via StructuredJSONFormatter

    Example:
        >>> configure_logging(level="DEBUG", structured=True, filename="validator.jsonl")
    """
    handler = _build_handler(filename)
    handler.setFormatter(
        StructuredJSONFormatter()
        if structured
        else logging.Formatter(format_string or DEFAULT_FORMAT)
    )
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)


def get_logger(name: str, **context: Any) -> logging.Logger | logging.LoggerAdapter:
    """Module logger, wrapped in a LoggerAdapter when context is given.

    Context keys (a manifest fingerprint, a file name) are attached to every
    record and show up under ``context`` in structured output.
    """
    base = logging.getLogger(name)
    return logging.LoggerAdapter(base, context) if context else base


def log_performance(func):
    """Log a call's wall time at DEBUG on the wrapped function's module logger."""
    timing_logger = logging.getLogger(func.__module__)

    @functools.wraps(func)
    def timed(*args, **kwargs):
        started = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            timing_logger.debug(
                "%s finished in %.2f ms",
                func.__qualname__,
                (time.perf_counter() - started) * 1000.0,
            )

    return timed


__all__ = [
    "DEFAULT_FORMAT",
    "StructuredJSONFormatter",
    "configure_logging",
    "get_logger",
    "log_performance",
]
