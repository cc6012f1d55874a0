"""
Structured JSON logging for the format readers.

Every line written under the ``format_kernel`` logger is one JSON object:

    {"ts": "2026-01-05T10:00:00+00:00", "level": "WARNING",
     "logger": "format_kernel.ingestion.delimited_reader",
     "event": "record_assembly_failed",
     "split_path": "/data/in/part-0.csv", "split_start": 0,
     "code": "FIELD_COUNT_MISMATCH", "observed": 4, "expected": 3, ...}

Messages are event names; details travel in ``extra``. Fields bound with
``LogContext.bind()`` (the split being read, the reader, the format) are
merged into every line written while the binding is active. An exception
logged with ``exc_info`` is described under ``error``, including the
``code`` and structured attributes of reader errors.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import UTC, date, datetime, time
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Any

_LOGGER_PREFIX = "format_kernel"


# ---------------------------------------------------------------------------
# Split context
# ---------------------------------------------------------------------------


class LogContext:
    """Split-scoped log fields held in context variables."""

    FIELDS = ("split_path", "split_start", "reader_id", "format_name")

    _vars: dict[str, ContextVar[Any]] = {
        name: ContextVar(f"format_log_{name}", default=None) for name in FIELDS
    }

    @classmethod
    def _var(cls, name: str) -> ContextVar[Any]:
        try:
            return cls._vars[name]
        except KeyError:
            raise TypeError(f"unknown log context field {name!r}") from None

    @classmethod
    def set(cls, **fields: Any) -> None:
        """Set context fields; None values are ignored."""
        for name, value in fields.items():
            if value is not None:
                cls._var(name).set(value)

    @classmethod
    def get_all(cls) -> dict[str, Any]:
        return {
            name: value
            for name, var in cls._vars.items()
            if (value := var.get()) is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in cls._vars.values():
            var.set(None)

    @classmethod
    @contextmanager
    def bind(cls, **fields: Any) -> Iterator[None]:
        """Set fields for the duration of a with-block, then restore them."""
        tokens: list[tuple[ContextVar[Any], Token[Any]]] = []
        for name, value in fields.items():
            if value is not None:
                var = cls._var(name)
                tokens.append((var, var.set(value)))
        try:
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    if isinstance(obj, (Decimal, PurePath)):
        return str(obj)
    return repr(obj)


def _describe_error(exc: BaseException) -> dict[str, Any]:
    info: dict[str, Any] = {"type": type(exc).__name__, "message": str(exc)}
    code = getattr(exc, "code", None)
    if code is not None:
        info["code"] = code
    for key, value in vars(exc).items():
        if not key.startswith("_"):
            info[key] = value
    return info


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload.update(LogContext.get_all())
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in payload:
                payload[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            payload["error"] = _describe_error(record.exc_info[1])
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_configured = False
_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Logger under the format_kernel namespace, e.g. ``format_kernel.config.loader``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(*, level: int = logging.INFO, stream: Any = None) -> None:
    """
    Send format_kernel logs as JSON lines to stream (stderr by default).

    Only the first call has an effect until reset_logging().
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(StructuredFormatter())
        root = logging.getLogger(_LOGGER_PREFIX)
        root.setLevel(level)
        root.propagate = False
        root.addHandler(handler)


def reset_logging() -> None:
    """Undo configure_logging(). For tests."""
    global _configured
    with _lock:
        _configured = False
        root = logging.getLogger(_LOGGER_PREFIX)
        root.handlers.clear()
        root.setLevel(logging.WARNING)
        root.propagate = True
