"""
Ledger clock. Integer seconds, non-decreasing; due dates share its unit.
"""
from __future__ import annotations

import threading
import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int: ...


class SystemClock:
    """Wall clock in UNIX seconds, clamped so it never goes backwards.

    The clamp holds per instance; services share the module-level
    ``system_clock`` so every call in the process reads the same clamp.
    """

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        current = int(time.time())
        with self._lock:
            if current > self._last:
                self._last = current
            return self._last


class ManualClock:
    """Clock advanced explicitly. Used by tests and replay tooling."""

    def __init__(self, start: int = 0) -> None:
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        self._now += seconds
        return self._now

    def set(self, value: int) -> None:
        if value < self._now:
            raise ValueError("clock cannot move backwards")
        self._now = value


system_clock = SystemClock()
