"""Process-local counters behind the /metrics endpoint."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from time import perf_counter
from typing import Optional


@dataclass
class RequestMetricsSnapshot:
    request_count: int
    average_ms: float
    max_ms: float
    last_ms: float


class RuntimeObservability:
    """Uptime, HTTP latency aggregates and failed store round-trips."""

    def __init__(self):
        self.process_started_at = datetime.now(timezone.utc)
        self._last_store_failure: Optional[datetime] = None
        self._store_failures = 0
        self._request_count = 0
        self._request_total_ms = 0.0
        self._request_max_ms = 0.0
        self._request_last_ms = 0.0
        self._lock = Lock()

    def mark_store_failure(self, timestamp: Optional[datetime] = None):
        failed_at = timestamp or datetime.now(timezone.utc)
        with self._lock:
            self._store_failures += 1
            self._last_store_failure = failed_at.astimezone(timezone.utc)

    def store_failures(self) -> int:
        with self._lock:
            return self._store_failures

    def last_store_failure(self) -> Optional[datetime]:
        with self._lock:
            return self._last_store_failure

    def mark_request_timing(self, elapsed_ms: float):
        with self._lock:
            self._request_count += 1
            self._request_total_ms += elapsed_ms
            self._request_last_ms = elapsed_ms
            self._request_max_ms = max(self._request_max_ms, elapsed_ms)

    def request_metrics(self) -> RequestMetricsSnapshot:
        """Latency aggregates rounded to microseconds; zeros before the first request."""
        with self._lock:
            count = self._request_count
            average = self._request_total_ms / count if count else 0.0
            return RequestMetricsSnapshot(
                request_count=count,
                average_ms=round(average, 3),
                max_ms=round(self._request_max_ms, 3),
                last_ms=round(self._request_last_ms, 3),
            )

    def uptime_seconds(self) -> float:
        return (datetime.now(timezone.utc) - self.process_started_at).total_seconds()


class RequestTimer:
    def __init__(self):
        self._started = perf_counter()

    def elapsed_ms(self) -> float:
        return (perf_counter() - self._started) * 1000


observability = RuntimeObservability()
