"""Process-wide service counters."""

from __future__ import annotations

from dataclasses import dataclass
import threading


@dataclass(frozen=True)
class StateSnapshot:
    initialized: bool
    request_count: int
    error_count: int

    @property
    def success_rate(self) -> float:
        if self.request_count == 0:
            return 0.0
        return (self.request_count - self.error_count) / self.request_count * 100

    def to_dict(self) -> dict:
        return {
            "initialized": self.initialized,
            "request_count": self.request_count,
            "error_count": self.error_count,
            "success_rate": self.success_rate,
        }


class ServiceState:
    """Initialized flag plus monotonic request/error counters.

    Counters only move forward; marking the service uninitialized (for example
    on a credential change) leaves them untouched.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._initialized = False
        self._request_count = 0
        self._error_count = 0

    @property
    def initialized(self) -> bool:
        return self._initialized

    def mark_initialized(self) -> None:
        with self._lock:
            self._initialized = True

    def mark_uninitialized(self) -> None:
        with self._lock:
            self._initialized = False

    def next_request_id(self) -> int:
        with self._lock:
            self._request_count += 1
            return self._request_count

    def record_error(self) -> int:
        with self._lock:
            self._error_count += 1
            return self._error_count

    def snapshot(self) -> StateSnapshot:
        with self._lock:
            return StateSnapshot(
                initialized=self._initialized,
                request_count=self._request_count,
                error_count=self._error_count,
            )
