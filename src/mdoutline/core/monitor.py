"""Deadline-bounded execution and latency bookkeeping."""

from __future__ import annotations

import asyncio
import inspect
import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from mdoutline.errors import ExtractionTimeoutError

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]] | Callable[[], T]


async def call_with_deadline(operation: Operation[T], timeout_ms: float) -> T:
    """Run ``operation`` and give up waiting after ``timeout_ms``.

    Coroutine functions are awaited on the current loop; plain callables run in a worker
    thread so a long synchronous parse cannot block the deadline. The deadline cancels
    waiting only: a worker thread that is already running finishes in the background.

    Raises:
        ExtractionTimeoutError: The deadline expired first.
    """

    if inspect.iscoroutinefunction(operation):
        awaitable = operation()
    else:
        awaitable = asyncio.to_thread(operation)

    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_ms / 1000)
    except asyncio.TimeoutError as exc:
        raise ExtractionTimeoutError(f"Section extraction timeout after {timeout_ms:.0f}ms") from exc


@dataclass
class OperationMetrics:
    """Latency counters for one operation name."""

    count: int = 0
    failures: int = 0
    total_ms: float = 0.0
    moving_average_ms: float = 0.0
    slow_count: int = 0

    @property
    def average_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0


class PerformanceMonitor:
    """Per-operation latency bookkeeping."""

    def __init__(self, slow_threshold_ms: float = 1000.0):
        """Initialize performance monitor.

        Args:
            slow_threshold_ms: Durations above this are counted as slow.
        """
        self.slow_threshold_ms = slow_threshold_ms
        self._metrics: dict[str, OperationMetrics] = defaultdict(OperationMetrics)
        self._lock = threading.Lock()

    def record_operation(self, operation: str, latency_ms: float, success: bool = True) -> bool:
        """Record one run of ``operation``. Returns True when it counts as slow."""
        slow = latency_ms > self.slow_threshold_ms
        with self._lock:
            metrics = self._metrics[operation]
            metrics.count += 1
            metrics.total_ms += latency_ms
            # Simple two-point moving average, seeded with the first sample.
            if metrics.count == 1:
                metrics.moving_average_ms = latency_ms
            else:
                metrics.moving_average_ms = (metrics.moving_average_ms + latency_ms) / 2
            if not success:
                metrics.failures += 1
            if slow:
                metrics.slow_count += 1
        return slow

    def get_metrics(self) -> dict[str, OperationMetrics]:
        with self._lock:
            return {name: OperationMetrics(**vars(m)) for name, m in self._metrics.items()}

    def moving_averages(self) -> dict[str, float]:
        with self._lock:
            return {name: m.moving_average_ms for name, m in self._metrics.items()}

    def reset_metrics(self) -> None:
        with self._lock:
            self._metrics.clear()


@dataclass
class Stopwatch:
    """Milliseconds since construction."""

    started: float = field(default_factory=time.perf_counter)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000
