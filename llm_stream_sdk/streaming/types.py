from __future__ import annotations

from enum import Enum
from typing import Any, AsyncGenerator, AsyncIterable, Iterable, Union

from ..models.events import ModelStreamEvent
from ..models.messages import CONTENT_BLOCK_TYPES, ContentBlock, ReasoningBlock, TextBlock, ToolUseBlock


# Items on the live channel: forwarded events plus synthesized finished blocks
StreamItem = Union[ModelStreamEvent, TextBlock, ToolUseBlock, ReasoningBlock]


class AggregationState(str, Enum):
    """Lifecycle of one aggregated response."""
    IDLE = "idle"
    STARTED = "started"
    STOPPED = "stopped"
    FINISHED = "finished"


def is_content_block(item: Any) -> bool:
    """True for a finalized content block, False for a forwarded event."""
    return isinstance(item, CONTENT_BLOCK_TYPES)


async def iterate_source(source: Union[AsyncIterable[Any], Iterable[Any]]) -> AsyncGenerator[Any, None]:
    """Iterate a sync or async source from async code."""
    if hasattr(source, "__aiter__"):
        async for item in source:
            yield item
    else:
        for item in source:
            yield item


__all__ = ["StreamItem", "AggregationState", "ContentBlock", "is_content_block", "iterate_source"]
