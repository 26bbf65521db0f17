"""Streaming layer for aggregating model responses.

This layer handles:
- Per-block accumulation of text, tool input and reasoning deltas
- The aggregation state machine with its live channel and final message
- Sync and async surfaces over the same state machine
"""

from .accumulator import BlockAccumulator, BlockKind
from .aggregator import (
    AggregatedStream,
    StreamAggregator,
    aggregate_events,
    collect_aggregated,
)
from .types import AggregationState, StreamItem, is_content_block, iterate_source

__all__ = [
    "BlockAccumulator",
    "BlockKind",
    "StreamAggregator",
    "AggregatedStream",
    "aggregate_events",
    "collect_aggregated",
    "AggregationState",
    "StreamItem",
    "is_content_block",
    "iterate_source",
]
