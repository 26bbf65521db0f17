"""Metrics sinks for exporting streaming metrics.

Available sinks:
- InMemory (for testing and debugging)
- Custom implementations via MetricsSink protocol
"""

from .base import MetricsSink
from .in_memory import InMemoryMetricsSink, MetricsSummary

__all__ = ["MetricsSink", "InMemoryMetricsSink", "MetricsSummary"]
