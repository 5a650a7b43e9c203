"""Counting admission gate bounding concurrent directory scans."""

from __future__ import annotations

import threading


class ConcurrencyGate:
    """Hands out at most ``limit`` permits at a time.

    Callers pair every ``acquire()`` with exactly one ``release()``. Extra
    releases are a programming error and are not detected. The gate remembers
    the lowest number of available permits ever observed so callers can tell
    whether the limit was ever reached.
    """

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self._available = limit
        self._minimum = limit
        self._cond = threading.Condition()

    def acquire(self) -> None:
        with self._cond:
            while self._available == 0:
                self._cond.wait()
            self._available -= 1
            if self._available < self._minimum:
                self._minimum = self._available

    def release(self) -> None:
        with self._cond:
            self._available += 1
            self._cond.notify()

    def limit_reached(self) -> bool:
        with self._cond:
            return self._minimum == 0

    @property
    def peak_in_use(self) -> int:
        with self._cond:
            return self.limit - self._minimum

    def __enter__(self) -> ConcurrencyGate:
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
