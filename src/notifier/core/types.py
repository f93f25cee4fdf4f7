"""
Core Types for Notifier.

Purpose
-------
Provides the type definitions shared by the notifier core: the listener
callable alias, the error policy enumeration, and the helpers that key a
listener by identity and name it in logs.

Design Decisions
----------------
- **Listener as Callable**: any callable taking one payload argument; the
  return value is ignored.
- **ErrorPolicy enum**: explicit knob choosing between aborting delivery on
  the first failure and isolating failures until delivery completes.
"""

from __future__ import annotations

import inspect
from enum import Enum
from typing import Any, Callable, Hashable, TypeVar

T = TypeVar("T")

# Listener callbacks take the payload as their only argument.
Listener = Callable[[T], Any]


class ErrorPolicy(Enum):
    """
    What notify() does when a listener raises.

    Values
    ------
    RAISE ("raise"):
        The first failure propagates unmodified to the caller of notify().
        Listeners after it in registration order are not invoked.

    COLLECT ("collect"):
        Every listener is invoked. Failures are gathered and raised together
        as a single NotificationError once delivery is complete.

    Examples
    --------
    >>> ErrorPolicy("collect") is ErrorPolicy.COLLECT
    True
    """

    RAISE = "raise"
    COLLECT = "collect"


def describe_listener(listener: Any) -> str:
    """
    Return a readable identifier for a listener, for logs and error details.

    Examples
    --------
    >>> def on_saved(payload): ...
    >>> describe_listener(on_saved)
    'mymodule.on_saved'
    """
    module = getattr(listener, "__module__", None)
    qualname = getattr(listener, "__qualname__", None) or getattr(
        listener, "__name__", None
    )
    if qualname is None:
        # Callable instances and mocks: fall back to the class name plus id.
        qualname = f"{type(listener).__qualname__}@{id(listener):#x}"
        module = type(listener).__module__
    return f"{module}.{qualname}" if module else qualname


def listener_key(listener: Any) -> Hashable:
    """
    Return the identity under which a listener is registered.

    Bound methods are keyed on the bound object and the underlying function,
    so ``obj.handler`` accessed twice names one listener. Everything else is
    keyed on ``id()``: equal but distinct callables stay distinct, and
    unhashable callables are accepted. Callers must keep a reference to the
    listener for as long as its key is stored.

    Examples
    --------
    >>> listener_key(obj.handler) == listener_key(obj.handler)
    True
    """
    if inspect.ismethod(listener):
        return (id(listener.__self__), listener.__func__)
    return id(listener)
