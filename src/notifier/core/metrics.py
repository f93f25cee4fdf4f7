"""
NotifierMetrics and NotifierMetricsRecorder.

Purpose
-------
Provides metrics collection and reporting for a Notifier, enabling
observability into deliveries, listener invocations, and error rates.

Responsibilities
----------------
- Count notify() calls and individual listener invocations
- Count listener errors
- Track the current listener count
- Provide immutable snapshots and formatted summaries

Design Decisions
----------------
- **Immutable snapshots**: NotifierMetrics is frozen; mutations go through
  the recorder
- **Separation**: Recorder (mutable) vs Metrics (immutable snapshot)
- **Own lock**: invocations are counted outside the notifier's lock, so the
  recorder guards its counters itself
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class NotifierMetrics:
    """
    Immutable snapshot of notifier metrics.

    Attributes
    ----------
    notifications:
        Number of notify() calls.
    invocations:
        Number of listener calls made across all notify() calls.
    listener_errors:
        Number of listener calls that raised.
    total_listeners:
        Number of listeners registered at snapshot time.

    Examples
    --------
    >>> metrics = NotifierMetrics(notifications=10, invocations=40, listener_errors=2)
    >>> metrics.get_summary()["error_rate"]
    5.0
    """

    notifications: int = 0
    invocations: int = 0
    listener_errors: int = 0
    total_listeners: int = 0

    def get_summary(self) -> dict[str, Any]:
        """
        Generate a formatted summary of metrics.

        Returns
        -------
        dict[str, Any]:
            Counters plus error_rate, the percentage of invocations that raised.
        """
        error_rate = (self.listener_errors / max(1, self.invocations)) * 100.0

        return {
            "total_notifications": self.notifications,
            "total_invocations": self.invocations,
            "total_errors": self.listener_errors,
            "total_listeners": self.total_listeners,
            "error_rate": round(error_rate, 2),
        }


class NotifierMetricsRecorder:
    """
    Mutable metrics recorder for a Notifier.

    Examples
    --------
    >>> recorder = NotifierMetricsRecorder()
    >>> recorder.record_notification()
    >>> recorder.record_invocation()
    >>> recorder.snapshot().invocations
    1
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._notifications = 0
        self._invocations = 0
        self._listener_errors = 0
        self._total_listeners = 0

    def record_notification(self) -> None:
        with self._lock:
            self._notifications += 1

    def record_invocation(self) -> None:
        with self._lock:
            self._invocations += 1

    def record_error(self) -> None:
        with self._lock:
            self._listener_errors += 1

    @property
    def total_listeners(self) -> int:
        return self._total_listeners

    def set_listener_count(self, count: int) -> None:
        """
        Set the current listener count.

        The count is clamped to 0 (never goes negative).
        """
        with self._lock:
            self._total_listeners = max(0, count)

    def reset(self) -> None:
        """Zero every counter except the listener count."""
        with self._lock:
            self._notifications = 0
            self._invocations = 0
            self._listener_errors = 0

    def snapshot(self) -> NotifierMetrics:
        """Return an immutable snapshot of current metrics."""
        with self._lock:
            return NotifierMetrics(
                notifications=self._notifications,
                invocations=self._invocations,
                listener_errors=self._listener_errors,
                total_listeners=self._total_listeners,
            )
