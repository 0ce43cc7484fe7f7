"""Thread safety utilities."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")

__all__ = ["wrap_with_lock", "SharedCounter"]


def wrap_with_lock(
    fn: Callable[..., T] | None,
    lock: Any = None,
) -> Callable[..., T] | None:
    """Wraps a function call with a lock."""
    if fn is None:
        return None
    lk = lock if lock is not None else threading.RLock()

    def wrapped(*args: Any, **kwargs: Any) -> T:
        """Wrapped function call."""
        with lk:
            return fn(*args, **kwargs)

    return wrapped


class SharedCounter:
    """Integer counter whose updates are serialized by a lock.

    ``increment`` and ``decrement`` return the value *after* the update, so
    exactly one caller observes any given transition (e.g. reaching zero).
    """

    def __init__(self, value: int = 0) -> None:
        """Initializes the counter with ``value``."""
        self._value = int(value)
        self._lock = threading.Lock()
        self.increment = wrap_with_lock(self._add_one, self._lock)
        self.decrement = wrap_with_lock(self._sub_one, self._lock)

    def _add_one(self) -> int:
        self._value += 1
        return self._value

    def _sub_one(self) -> int:
        if self._value <= 0:
            raise RuntimeError("counter decremented below zero.")
        self._value -= 1
        return self._value

    @property
    def value(self) -> int:
        """Current counter value."""
        return self._value
