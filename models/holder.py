from __future__ import annotations

import logging
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Notifier(Generic[T]):
    """
    Ordered list of callbacks invoked synchronously with a value.
    A failing callback is logged and reported but never stops the others.
    """

    def __init__(self, error_handler: Optional[Callable[[Callable, Exception], None]] = None) -> None:
        self._callbacks: List[Callable[[T], None]] = []
        self._error_handler = error_handler

    def add(self, callback: Callable[[T], None]) -> None:
        self._callbacks.append(callback)

    def notify(self, value: T) -> None:
        for callback in list(self._callbacks):
            try:
                callback(value)
            except Exception as exc:
                logger.exception("Subscriber %r failed", callback)
                if self._error_handler is not None:
                    try:
                        self._error_handler(callback, exc)
                    except Exception:
                        logger.exception("Error handler %r failed", self._error_handler)

    def __len__(self) -> int:
        return len(self._callbacks)


class Holder(Generic[T]):
    """Owns one value and publishes every replacement to its subscribers."""

    def __init__(self, value: T, error_handler: Optional[Callable[[Callable, Exception], None]] = None) -> None:
        self._value = value
        self._notifier: Notifier[T] = Notifier(error_handler=error_handler)

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Replace the value; returns once every subscriber has seen it."""
        self._value = value
        self._notifier.notify(value)

    def subscribe(self, callback: Callable[[T], None]) -> None:
        """Register for future replacements (the current value is not replayed)."""
        self._notifier.add(callback)

    def notifier(self) -> Notifier[T]:
        return self._notifier
