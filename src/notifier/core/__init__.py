"""
Notifier core.

Exposes the Notifier primitive together with its types, errors and metrics.
"""

from .errors import (
    InvalidListenerError,
    NotificationError,
    NotifierException,
    handle_listener_error,
)
from .metrics import NotifierMetrics, NotifierMetricsRecorder
from .notifier import Notifier
from .types import ErrorPolicy, Listener, describe_listener, listener_key

__all__ = [
    "Notifier",
    "ErrorPolicy",
    "Listener",
    "describe_listener",
    "listener_key",
    "NotifierException",
    "InvalidListenerError",
    "NotificationError",
    "handle_listener_error",
    "NotifierMetrics",
    "NotifierMetricsRecorder",
]
