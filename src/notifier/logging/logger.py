"""
Notifier Logging Subsystem

Purpose
-------
Provide the logging helpers used throughout the notifier package:

- JSON lines for aggregation, colored text for a developer terminal.
- LogContext scopes backed by a ContextVar, so records emitted while a
  notifier delivers (including those from listeners) carry the notifier name,
  the operation and a correlation id.

Responsibilities
----------------
- Install (and remove) a single console handler on the root logger
- Stamp every handled record with component, operation and correlation_id
- get_logger() and LogContext for library and application code

Design Decisions
----------------
- The package never configures logging on import. Applications call
  setup_logging(); library code only calls get_logger().
- Anything passed via ``extra={...}`` that is not a standard LogRecord
  attribute ends up under the "extra" key of the JSON output.

Dependencies
------------
- notifier.config.Config
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from datetime import datetime, timezone
from logging import Logger
from typing import Any, Dict, Optional

from notifier.config import Config


# ============================================================================
# Operation Context (ContextVars)
# ============================================================================

_log_context: ContextVar[Dict[str, Any]] = ContextVar(
    "notifier_log_context",
    default={},
)

CONTEXT_FIELDS = ("component", "operation", "correlation_id")


# ============================================================================
# Config / Environment
# ============================================================================


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Console format plus the Config-derived switches for setup_logging()."""

    CONSOLE_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
    DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    @property
    def log_level(self) -> int:
        return logging.getLevelName(Config.LOG_LEVEL.upper())

    @property
    def use_json(self) -> bool:
        if Config.LOG_JSON is None:
            return Config.is_production()
        return Config.LOG_JSON

    @property
    def use_colors(self) -> bool:
        if self.use_json or Config.is_production():
            return False
        return Config.LOG_COLORS and sys.stdout.isatty()


LOGGER_CONFIG = LoggerConfig()


# ============================================================================
# Filters & Formatters
# ============================================================================


class ContextFilter(logging.Filter):
    """Copy the active LogContext onto each record without clobbering extras."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        attrs = record.__dict__
        for key, value in _log_context.get().items():
            attrs.setdefault(key, value)

        attrs.setdefault("component", record.name.partition(".")[0])
        attrs.setdefault("operation", "N/A")
        attrs.setdefault("correlation_id", "N/A")
        return True


class ColoredFormatter(logging.Formatter):
    """Wrap each formatted line in the ANSI color of its level."""

    RESET = "\033[0m"
    LEVEL_COLORS: Dict[int, str] = {
        logging.DEBUG: "\033[90m",
        logging.INFO: "\033[94m",
        logging.WARNING: "\033[93m",
        logging.ERROR: "\033[91m",
        logging.CRITICAL: "\033[1;91m",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        line = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        return f"{color}{line}{self.RESET}" if color else line


# Attributes every LogRecord has before any `extra` is applied.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per record; unknown objects are rendered with str()."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, "N/A")
            if value != "N/A":
                entry[field] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
            and key not in CONTEXT_FIELDS
            and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, ensure_ascii=False, default=str)


# ============================================================================
# Global Setup
# ============================================================================

_console_handler: Optional[logging.Handler] = None


def _build_console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(LOGGER_CONFIG.log_level)

    if LOGGER_CONFIG.use_json:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter_cls = ColoredFormatter if LOGGER_CONFIG.use_colors else logging.Formatter
        formatter = formatter_cls(
            fmt=LOGGER_CONFIG.CONSOLE_FORMAT,
            datefmt=LOGGER_CONFIG.DATE_FORMAT,
        )

    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter())
    return handler


def setup_logging() -> None:
    """Attach the console handler to the root logger. Repeated calls do nothing."""
    global _console_handler

    if _console_handler is not None:
        return

    _console_handler = _build_console_handler()
    root = logging.getLogger()
    root.setLevel(LOGGER_CONFIG.log_level)
    root.addHandler(_console_handler)

    logging.getLogger(__name__).info(
        "Logging initialized",
        extra={
            "environment": Config.ENVIRONMENT,
            "log_level": Config.LOG_LEVEL,
            "json": LOGGER_CONFIG.use_json,
        },
    )


def shutdown_logging() -> None:
    """Detach and close the handler installed by setup_logging()."""
    global _console_handler

    handler, _console_handler = _console_handler, None
    if handler is None:
        return

    logging.getLogger().removeHandler(handler)
    try:
        handler.flush()
    finally:
        handler.close()


# ============================================================================
# Public API
# ============================================================================


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Scoped logging context.

    Nested scopes inherit the enclosing fields (correlation id included) and
    override the ones they pass. Leaving the block restores the outer scope.

    Examples
    --------
    >>> with LogContext(component="orders", operation="checkout"):
    ...     order_placed.notify(order)
    """

    def __init__(
        self,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        correlation_id: Optional[str] = None,
        **fields: Any,
    ) -> None:
        scoped = {**_log_context.get(), **fields}
        if component is not None:
            scoped["component"] = component
        if operation is not None:
            scoped["operation"] = operation
        scoped["correlation_id"] = (
            correlation_id or scoped.get("correlation_id") or uuid.uuid4().hex[:8]
        )

        self.fields: Dict[str, Any] = scoped
        self._token: Optional[Token[Dict[str, Any]]] = None

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set(self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        token, self._token = self._token, None
        if token is not None:
            _log_context.reset(token)


def get_log_context() -> Dict[str, Any]:
    """Copy of the fields of the innermost active LogContext."""
    return dict(_log_context.get())
