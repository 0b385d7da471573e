"""
Image Colors Metrics Collection
In-process counters and latency windows, exposed through GET /v1/metrics.
"""
import time
from collections import Counter, defaultdict, deque
from threading import Lock
from typing import Any, Deque, Dict, Optional

import numpy as np

from imagecolors.config import config

# Timings kept per operation; older samples drop out of the window
TIMING_WINDOW = 1000


class MetricsCollector:
    """
    Thread-safe metrics collector.

    Counters are plain monotonically increasing integers. Timings are kept in
    a bounded window per operation and summarised on demand. When disabled,
    every recording call is a no-op and snapshots stay empty.
    """

    def __init__(self, enabled: bool = True, window: int = TIMING_WINDOW):
        self.enabled = enabled
        self._lock = Lock()
        self._counters: Counter = Counter()
        self._timings: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=window))
        self._start_time = time.time()

    def increment_counter(self, name: str, amount: int = 1):
        if not self.enabled:
            return
        with self._lock:
            self._counters[name] += amount

    def increment_profile_count(self, profile: str):
        """Count one extraction run for the given profile."""
        self.increment_counter(f"colors_profile_total_{profile}")

    def record_timing(self, operation: str, duration_ms: float):
        """Record one duration; stored under "<operation>_duration_ms"."""
        if not self.enabled:
            return
        with self._lock:
            self._timings[f"{operation}_duration_ms"].append(duration_ms)

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """count/mean/min/max/p50/p95 per timed operation."""
        with self._lock:
            windows = {name: np.fromiter(values, dtype=np.float64)
                       for name, values in self._timings.items() if values}

        stats = {}
        for name, values in windows.items():
            p50, p95 = np.percentile(values, [50, 95])
            stats[name] = {
                "count": int(values.size),
                "mean": float(values.mean()),
                "min": float(values.min()),
                "max": float(values.max()),
                "p50": float(p50),
                "p95": float(p95),
            }
        return stats

    def get_summary(self) -> Dict[str, Any]:
        return {
            "uptime_seconds": time.time() - self._start_time,
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats()
        }

    def reset(self):
        """Drop all counters and timings (for testing)."""
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._start_time = time.time()


_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Process-wide collector, created on first use."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector(enabled=config.METRICS_ENABLED)
    return _metrics


def reset_metrics():
    if _metrics is not None:
        _metrics.reset()
