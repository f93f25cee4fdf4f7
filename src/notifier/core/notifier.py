"""
Notifier: synchronous typed publish/subscribe primitive.

Purpose
-------
Holds a deduplicated, registration-ordered collection of listener callbacks
and invokes each of them with a payload when notified.

Responsibilities
----------------
- Register listeners (idempotent) and remove one or all of them
- Deliver a payload to every registered listener, synchronously and in order
- Apply the configured error policy when a listener raises
- Log listener management and failures; collect optional metrics

Design Decisions
----------------
- **Identity dedup**: listeners are stored in an insertion-ordered dict keyed
  by listener_key(). Distinct objects stay distinct even when they compare
  equal, unhashable callables are accepted, and a bound method counts as one
  listener per (object, function) pair.
- **Snapshot delivery**: notify() copies the listener set before invoking
  anything. A listener added during delivery first fires on the next call;
  one removed during delivery still receives the current call.
- **Locking**: an RLock guards the listener dict. Listeners run outside the
  lock so they may subscribe or unsubscribe re-entrantly.
- **Error policy**: RAISE (default) lets the first failure propagate
  unmodified; COLLECT runs every listener and raises one NotificationError.
- **Log context**: delivery runs inside a LogContext (operation "notify" and
  the notifier name) so records emitted by listeners carry it.
- **Config-driven defaults**: error policy and metrics fall back to Config
  when not passed to the constructor.
"""

from __future__ import annotations

import threading
from typing import Any, Generic, Hashable, Iterator, Optional, TypeVar, Union

from notifier.config import Config
from notifier.core.errors import (
    InvalidListenerError,
    NotificationError,
    handle_listener_error,
)
from notifier.core.metrics import NotifierMetrics, NotifierMetricsRecorder
from notifier.core.types import (
    ErrorPolicy,
    Listener,
    describe_listener,
    listener_key,
)
from notifier.logging import LogContext, get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Notifier(Generic[T]):
    """
    Synchronous fan-out of a payload of type ``T`` to registered listeners.

    Examples
    --------
    >>> saved: Notifier[str] = Notifier(name="document.saved")
    >>> saved.subscribe(print)
    >>> saved.notify("report.pdf")
    report.pdf
    >>> saved.unsubscribe(print)
    >>> saved.notify("ignored")
    """

    def __init__(
        self,
        name: str = "notifier",
        *,
        error_policy: Optional[Union[ErrorPolicy, str]] = None,
        enable_metrics: Optional[bool] = None,
    ) -> None:
        """
        Parameters
        ----------
        name:
            Label used in logs, metrics and error details.
        error_policy:
            ErrorPolicy (or its string value). Uses Config.NOTIFIER_ERROR_POLICY
            if None.
        enable_metrics:
            Whether to collect metrics. Uses Config.NOTIFIER_ENABLE_METRICS
            if None.

        Raises
        ------
        ValueError:
            If error_policy is a string that names no ErrorPolicy.
        """
        self.name = name
        self._listeners: dict[Hashable, Listener[T]] = {}
        self._lock = threading.RLock()

        self._error_policy = self._resolve_error_policy(error_policy)

        if enable_metrics is None:
            enable_metrics = Config.NOTIFIER_ENABLE_METRICS
        self._metrics: Optional[NotifierMetricsRecorder] = (
            NotifierMetricsRecorder() if enable_metrics else None
        )

    @staticmethod
    def _resolve_error_policy(
        override: Optional[Union[ErrorPolicy, str]],
    ) -> ErrorPolicy:
        if override is not None:
            return ErrorPolicy(override)

        try:
            return ErrorPolicy(Config.NOTIFIER_ERROR_POLICY)
        except ValueError:
            logger.warning(
                "Unknown error policy in config, using default",
                extra={
                    "config_key": "NOTIFIER_ERROR_POLICY",
                    "value": Config.NOTIFIER_ERROR_POLICY,
                    "default_value": ErrorPolicy.RAISE.value,
                },
            )
            return ErrorPolicy.RAISE

    # ------------------------------------------------------------------ #
    # Subscription API
    # ------------------------------------------------------------------ #

    def subscribe(self, listener: Listener[T]) -> None:
        """
        Register a listener. Subscribing an already registered listener is a
        no-op, so it is still invoked once per notify().

        Raises
        ------
        InvalidListenerError:
            If listener is not callable.
        """
        if not callable(listener):
            raise InvalidListenerError(listener)

        key = listener_key(listener)
        with self._lock:
            if key in self._listeners:
                logger.debug(
                    "Notifier: listener already subscribed",
                    extra={
                        "notifier": self.name,
                        "listener_id": describe_listener(listener),
                    },
                )
                return
            self._listeners[key] = listener
            self._sync_listener_count()

        logger.debug(
            "Notifier: subscribed listener",
            extra={"notifier": self.name, "listener_id": describe_listener(listener)},
        )

    def unsubscribe(self, listener: Listener[T]) -> None:
        """Remove a listener. Removing one that is not registered does nothing."""
        with self._lock:
            if self._listeners.pop(listener_key(listener), None) is None:
                return
            self._sync_listener_count()

        logger.debug(
            "Notifier: unsubscribed listener",
            extra={"notifier": self.name, "listener_id": describe_listener(listener)},
        )

    def unsubscribe_all(self) -> None:
        """Remove every listener."""
        with self._lock:
            previous = len(self._listeners)
            self._listeners.clear()
            self._sync_listener_count()

        logger.debug(
            "Notifier: cleared all listeners",
            extra={"notifier": self.name, "previous_listener_count": previous},
        )

    def _sync_listener_count(self) -> None:
        if self._metrics is not None:
            self._metrics.set_listener_count(len(self._listeners))

    # ------------------------------------------------------------------ #
    # Delivery
    # ------------------------------------------------------------------ #

    def notify(self, data: T) -> None:
        """
        Invoke every registered listener with ``data``, in registration order.

        Raises
        ------
        Exception:
            Under ErrorPolicy.RAISE, the first exception raised by a listener,
            unmodified. Remaining listeners are not invoked.
        NotificationError:
            Under ErrorPolicy.COLLECT, after all listeners ran, if any raised.
        """
        with self._lock:
            listeners = tuple(self._listeners.values())

        if self._metrics is not None:
            self._metrics.record_notification()

        if not listeners:
            logger.debug("Notifier: no listeners", extra={"notifier": self.name})
            return

        logger.debug(
            "Notifier: notifying listeners",
            extra={"notifier": self.name, "listener_count": len(listeners)},
        )

        failures: list[tuple[Listener[T], Exception]] = []
        with LogContext(operation="notify", notifier=self.name):
            for listener in listeners:
                if self._metrics is not None:
                    self._metrics.record_invocation()
                try:
                    listener(data)
                except Exception as exc:
                    handle_listener_error(
                        logger=logger,
                        notifier_name=self.name,
                        listener=listener,
                        exc=exc,
                        metrics=self._metrics,
                    )
                    if self._error_policy is ErrorPolicy.RAISE:
                        raise
                    failures.append((listener, exc))

        if failures:
            raise NotificationError(self.name, failures)

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    @property
    def listeners(self) -> tuple[Listener[T], ...]:
        """Registered listeners, in registration order."""
        with self._lock:
            return tuple(self._listeners.values())

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    @property
    def error_policy(self) -> ErrorPolicy:
        return self._error_policy

    def is_subscribed(self, listener: Any) -> bool:
        with self._lock:
            return listener_key(listener) in self._listeners

    def __contains__(self, listener: Any) -> bool:
        return self.is_subscribed(listener)

    def __len__(self) -> int:
        return self.listener_count

    def __iter__(self) -> Iterator[Listener[T]]:
        return iter(self.listeners)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"name={self.name!r}, "
            f"listeners={self.listener_count}, "
            f"error_policy={self._error_policy.value!r}"
            ")"
        )

    # ------------------------------------------------------------------ #
    # Metrics
    # ------------------------------------------------------------------ #

    def get_metrics(self) -> Optional[NotifierMetrics]:
        """Immutable metrics snapshot, or None when metrics are disabled."""
        if self._metrics is None:
            return None
        return self._metrics.snapshot()

    def get_metrics_summary(self) -> dict[str, Any]:
        metrics = self.get_metrics()
        if metrics is None:
            return {}
        return metrics.get_summary()

