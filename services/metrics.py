"""Metrics aggregation for upstream backend calls.

Collects per-endpoint latency and status counts in memory so ``/api/health``
can report how the platform backend is behaving from this worker's view.
"""

from __future__ import annotations

import math
import re
import threading
from collections import defaultdict

# Collapse ids so /classes/abc-123 and /classes/xyz-9 share one bucket
_ID_SEGMENT = re.compile(r"/[^/]*\d[^/]*")


def _percentile(values: list[float], p: float) -> float:
    if not values:
        return 0.0
    if len(values) == 1:
        return values[0]
    ordered = sorted(values)
    pos = (len(ordered) - 1) * p
    lo = math.floor(pos)
    hi = math.ceil(pos)
    if lo == hi:
        return ordered[lo]
    frac = pos - lo
    return ordered[lo] * (1 - frac) + ordered[hi] * frac


def endpoint_key(method: str, path: str) -> str:
    """Normalize ``GET /classes/c-42`` to ``GET /classes/{id}``."""
    return f"{method} {_ID_SEGMENT.sub('/{id}', path.split('?', 1)[0])}"


class MetricsCollector:
    """Thread-safe in-memory metrics collector."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._latencies: dict[str, list[float]] = defaultdict(list)
        self._status: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        self._fallbacks: dict[str, int] = defaultdict(int)

    def record_call(self, *, endpoint: str, status: str, latency_ms: float) -> None:
        with self._lock:
            self._latencies[endpoint].append(float(latency_ms))
            self._status[endpoint][status] += 1

    def record_fallback(self, source: str) -> None:
        """Count a mock-data fallback taken by *source* (e.g. ``session_list``)."""
        with self._lock:
            self._fallbacks[source] += 1

    def snapshot(self) -> dict:
        with self._lock:
            endpoints = {}
            for name, latencies in self._latencies.items():
                status_map = self._status.get(name, {})
                total = sum(status_map.values())
                ok_count = status_map.get("ok", 0)
                endpoints[name] = {
                    "count": total,
                    "success_rate": (ok_count / total) if total else 0.0,
                    "latency_p50_ms": round(_percentile(latencies, 0.5), 2),
                    "latency_p95_ms": round(_percentile(latencies, 0.95), 2),
                    "status_breakdown": dict(status_map),
                }

            return {
                "endpoints": endpoints,
                "fallbacks": dict(self._fallbacks),
            }

    def reset(self) -> None:
        with self._lock:
            self._latencies.clear()
            self._status.clear()
            self._fallbacks.clear()


_metrics_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    return _metrics_collector
