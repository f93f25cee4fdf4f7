"""
Exceptions and error handling helpers for Notifier.

Purpose
-------
Define the structured exception hierarchy raised by the notifier core, and
the centralized helper that logs and counts listener failures.

Design Notes
------------
- All notifier exceptions inherit from `NotifierException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict)
  - `error_code`: short, stable identifier for programmatic use
- Listener exceptions under the RAISE policy are never wrapped; callers see
  the original exception. Only the COLLECT policy produces a
  `NotificationError`.
"""

from __future__ import annotations

from logging import Logger
from typing import Any, Dict, List, Optional, Sequence, Tuple

from notifier.core.metrics import NotifierMetricsRecorder
from notifier.core.types import describe_listener


class NotifierException(Exception):
    """
    Base exception for all notifier errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        error_code: Optional code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}"
            ")"
        )


class InvalidListenerError(NotifierException, TypeError):
    """Raised when subscribe() is given something that cannot be called."""

    def __init__(self, listener: Any) -> None:
        self.listener = listener
        super().__init__(
            f"Listener must be callable, got {type(listener).__name__}",
            details={"listener_type": type(listener).__name__},
            error_code="INVALID_LISTENER",
        )


class NotificationError(NotifierException):
    """
    Raised after delivery when one or more listeners failed under the
    COLLECT error policy.

    Attributes
    ----------
    failures:
        (listener, exception) pairs in invocation order.
    """

    def __init__(
        self,
        notifier_name: str,
        failures: Sequence[Tuple[Any, Exception]],
    ) -> None:
        self.failures: List[Tuple[Any, Exception]] = list(failures)
        count = len(self.failures)
        super().__init__(
            f"{count} listener(s) failed during notify on '{notifier_name}'",
            details={
                "notifier": notifier_name,
                "failed_listeners": [describe_listener(lst) for lst, _ in self.failures],
                "error_types": [type(exc).__name__ for _, exc in self.failures],
            },
            error_code="NOTIFICATION_FAILED",
        )

    @property
    def exceptions(self) -> List[Exception]:
        return [exc for _, exc in self.failures]


def handle_listener_error(
    *,
    logger: Logger,
    notifier_name: str,
    listener: Any,
    exc: Exception,
    metrics: Optional[NotifierMetricsRecorder],
) -> None:
    """
    Log a listener failure and update metrics.

    Never raises; the caller decides whether the exception propagates.

    Examples
    --------
    >>> try:
    ...     listener(data)
    ... except Exception as exc:
    ...     handle_listener_error(
    ...         logger=logger,
    ...         notifier_name="orders",
    ...         listener=listener,
    ...         exc=exc,
    ...         metrics=recorder,
    ...     )
    ...     raise
    """
    if metrics is not None:
        metrics.record_error()

    logger.error(
        "Notifier listener error",
        extra={
            "notifier": notifier_name,
            "listener_id": describe_listener(listener),
            "error": str(exc),
            "error_type": type(exc).__name__,
        },
        exc_info=(type(exc), exc, exc.__traceback__),
    )
