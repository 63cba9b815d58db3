"""Cancellation signal shared between a caller and the retry transport.

The retry loop only blocks while waiting between attempts; that wait races
against a `CancelToken` so a caller (or a deadline) can abort a request that is
stuck backing off.
"""

from __future__ import annotations

import threading
import time

DEADLINE_EXCEEDED = "deadline exceeded"


class CancelToken:
    """Thread-safe, one-shot cancellation flag with an optional deadline."""

    def __init__(self, *, timeout: float | None = None) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: str | None = None
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    @property
    def cancelled(self) -> bool:
        if not self._event.is_set() and self._deadline_passed():
            self.cancel(DEADLINE_EXCEEDED)
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._reason = reason
            self._event.set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to `seconds`; return True if cancelled before the delay elapsed."""

        if self.cancelled:
            return True

        if self._deadline is not None:
            remaining = self._deadline - time.monotonic()
            if remaining <= seconds:
                if self._event.wait(max(0.0, remaining)):
                    return True
                self.cancel(DEADLINE_EXCEEDED)
                return True

        return self._event.wait(max(0.0, seconds))

    def _deadline_passed(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline
