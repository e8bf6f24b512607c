"""Process-wide request/error counters owned by a catalog service."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CounterSnapshot:
    requests: int
    errors: int
    uptime_seconds: float

    @property
    def error_rate(self) -> Optional[float]:
        """Errors per request, ``None`` until a request has been recorded."""
        if self.requests == 0:
            return None
        return self.errors / self.requests

    @property
    def success_rate(self) -> Optional[float]:
        rate = self.error_rate
        return None if rate is None else 1.0 - rate


class RequestCounters:
    """Monotonic counters, zero at construction, never reset.

    ``record`` is the only mutator: one request per call, plus one error
    when ``failed``.  Both increments happen under the same lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._requests = 0
        self._errors = 0
        self._started = time.monotonic()

    def record(self, failed: bool) -> None:
        with self._lock:
            self._requests += 1
            if failed:
                self._errors += 1

    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            return CounterSnapshot(
                requests=self._requests,
                errors=self._errors,
                uptime_seconds=time.monotonic() - self._started,
            )
