"""Base interface for metrics sinks."""

from ..metrics import MetricsSink

__all__ = ["MetricsSink"]
