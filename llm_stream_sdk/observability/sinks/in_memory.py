"""
In-memory metrics sink for testing and debugging.

This sink stores streaming metrics in memory and provides simple query
and summary helpers, useful for tests and local development.
"""

from __future__ import annotations

import asyncio
import statistics
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

from ..metrics import MetricsSink, StreamingMetrics


@dataclass
class MetricsSummary:
    """Summary statistics for a set of streaming metrics."""
    count: int = 0
    avg_duration_ms: float = 0.0
    p50_duration_ms: float = 0.0
    total_blocks: int = 0
    total_tokens: int = 0
    stop_reasons: Dict[str, int] = field(default_factory=dict)
    providers: Dict[str, int] = field(default_factory=dict)


class InMemoryMetricsSink(MetricsSink):
    """
    In-memory metrics storage with query capabilities.

    Keeps at most ``max_size`` records; the oldest are dropped first.
    """

    def __init__(self, max_size: int = 10000):
        self.max_size = max_size
        self._metrics: Deque[StreamingMetrics] = deque(maxlen=max_size)
        self._lock = asyncio.Lock()

    async def record(self, metrics: StreamingMetrics) -> None:
        """Record a metric."""
        async with self._lock:
            self._metrics.append(metrics)

    async def flush(self) -> None:
        """No-op for in-memory sink."""
        pass

    async def get_metrics(
        self,
        provider: Optional[str] = None,
        request_id: Optional[str] = None,
        limit: int = 100
    ) -> List[StreamingMetrics]:
        """Return recorded metrics, optionally filtered by provider or request ID."""
        async with self._lock:
            results = []
            for metric in self._metrics:
                if provider and metric.provider != provider:
                    continue
                if request_id and metric.request_id != request_id:
                    continue
                results.append(metric)
                if len(results) >= limit:
                    break
            return results

    async def get_summary(self, provider: Optional[str] = None) -> MetricsSummary:
        """Summarize all recorded metrics."""
        async with self._lock:
            durations = []
            summary = MetricsSummary()
            stop_reasons: Dict[str, int] = defaultdict(int)
            providers: Dict[str, int] = defaultdict(int)

            for metric in self._metrics:
                if provider and metric.provider != provider:
                    continue
                durations.append(metric.duration_ms)
                summary.total_blocks += metric.blocks_completed
                summary.total_tokens += metric.total_tokens
                if metric.stop_reason:
                    stop_reasons[metric.stop_reason] += 1
                providers[metric.provider or "unknown"] += 1

            summary.count = len(durations)
            if durations:
                summary.avg_duration_ms = statistics.mean(durations)
                summary.p50_duration_ms = statistics.median(durations)
            summary.stop_reasons = dict(stop_reasons)
            summary.providers = dict(providers)
            return summary

    async def clear(self) -> None:
        async with self._lock:
            self._metrics.clear()
