from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

"""Search debouncer: one evaluation per keystroke burst.

Each submit() cancels the pending evaluation and schedules a fresh one after
the delay. The callback runs on a threading.Timer thread; callers that share
state with it must serialize access.
"""

__all__ = [
    "SearchDebouncer",
]

T = TypeVar("T")

_NOTHING = object()


class SearchDebouncer(Generic[T]):
    def __init__(self, delay_seconds: float, callback: Callable[[T], None]) -> None:
        self.delay_seconds = delay_seconds
        self._callback = callback
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._value: object = _NOTHING

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def submit(self, value: T) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._value = value
            timer = threading.Timer(self.delay_seconds, self._fire)
            timer.args = (timer,)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _take(self, timer: threading.Timer | None = None) -> object:
        with self._lock:
            # a timer superseded by a later submit() must not consume the new value
            if timer is not None and timer is not self._timer:
                return _NOTHING
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            value, self._value = self._value, _NOTHING
            return value

    def _fire(self, timer: threading.Timer) -> None:
        value = self._take(timer)
        if value is not _NOTHING:
            self._callback(value)  # type: ignore[arg-type]

    def flush(self) -> bool:
        """Run the pending evaluation now. Returns False when nothing was pending."""
        value = self._take()
        if value is _NOTHING:
            return False
        self._callback(value)  # type: ignore[arg-type]
        return True

    def cancel(self) -> None:
        self._take()
