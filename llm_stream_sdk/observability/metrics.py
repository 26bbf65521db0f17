from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol


@dataclass
class StreamingMetrics:
    """Metrics for one aggregated response stream."""
    request_id: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    # Counts
    total_events: int = 0
    total_deltas: int = 0
    blocks_completed: int = 0
    text_blocks: int = 0
    tool_use_blocks: int = 0
    reasoning_blocks: int = 0
    text_chars: int = 0

    # Timing
    duration_ms: float = 0.0
    time_to_first_event_ms: Optional[float] = None

    # Outcome
    stop_reason: Optional[str] = None
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary format."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


class MetricsSink(Protocol):
    async def record(self, metrics: StreamingMetrics) -> None: ...
    async def flush(self) -> None: ...
