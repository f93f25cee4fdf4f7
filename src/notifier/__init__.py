"""
Notifier: a minimal typed publish/subscribe primitive.

>>> from notifier import Notifier
>>> greetings: Notifier[str] = Notifier()
>>> greetings.subscribe(print)
>>> greetings.notify("hi")
hi
"""

from notifier.config import Config
from notifier.core import (
    ErrorPolicy,
    InvalidListenerError,
    Listener,
    NotificationError,
    Notifier,
    NotifierException,
    NotifierMetrics,
)
from notifier.logging import LogContext, get_logger, setup_logging, shutdown_logging

__version__ = "1.0.0"

__all__ = [
    "Notifier",
    "ErrorPolicy",
    "Listener",
    "NotifierException",
    "InvalidListenerError",
    "NotificationError",
    "NotifierMetrics",
    "Config",
    "LogContext",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
]
