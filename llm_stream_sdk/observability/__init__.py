"""Observability layer for logging and streaming metrics.

This layer handles:
- Structured logging for aggregation and providers
- Per-stream metrics records
- Pluggable metrics sinks
"""

from .logging import StreamLogger
from .metrics import MetricsSink, StreamingMetrics
from .sinks import InMemoryMetricsSink

__all__ = [
    "StreamLogger",
    "StreamingMetrics",
    "MetricsSink",
    "InMemoryMetricsSink",
]
