"""Per-call context: request identifier plus cancellation signal.

Every repository and service operation receives a ``RequestContext``.
The HTTP layer builds one per request from the correlation ID bound by
``CorrelationIdMiddleware`` and the configured request timeout.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from modules.core.exceptions import Cancelled


@dataclass
class RequestContext:
    """Request identifier, optional deadline and cancel flag.

    ``deadline`` is an absolute ``time.monotonic()`` value.
    """

    request_id: str = ""
    deadline: Optional[float] = None
    _cancel_event: threading.Event = field(
        default_factory=threading.Event, init=False, repr=False, compare=False
    )

    @classmethod
    def with_timeout(cls, request_id: str, timeout: Optional[float]) -> RequestContext:
        deadline = time.monotonic() + timeout if timeout else None
        return cls(request_id=request_id, deadline=deadline)

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, ``None`` when unbounded."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise Cancelled("operation cancelled by caller")
        if self.expired:
            raise Cancelled("operation deadline exceeded")

    def sleep(self, seconds: float) -> None:
        """Block for ``seconds`` unless cancelled or past the deadline first."""
        remaining = self.remaining()
        timeout = seconds if remaining is None else min(seconds, remaining)
        if self._cancel_event.wait(timeout):
            raise Cancelled("operation cancelled by caller")
        if remaining is not None and seconds >= remaining:
            raise Cancelled("operation deadline exceeded")


def background_context() -> RequestContext:
    """Unbounded context for management commands and internal callers."""
    return RequestContext(request_id="background")
