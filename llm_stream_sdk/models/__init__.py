"""Data models for the LLM Stream SDK."""

from .events import (
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    Delta,
    MessageStartEvent,
    MessageStopEvent,
    MetadataEvent,
    ModelStreamEvent,
    ReasoningContentDelta,
    TextDelta,
    ToolUseInputDelta,
    ToolUseStart,
)
from .messages import (
    ContentBlock,
    Message,
    ReasoningBlock,
    Role,
    StopReason,
    TextBlock,
    ToolUseBlock,
    Usage,
)
from .streaming import DEBUG_OPTIONS, DEFAULT_OPTIONS, StreamingOptions

__all__ = [
    # Stream events
    "MessageStartEvent",
    "ContentBlockStartEvent",
    "ContentBlockDeltaEvent",
    "ContentBlockStopEvent",
    "MessageStopEvent",
    "MetadataEvent",
    "ModelStreamEvent",
    "ToolUseStart",

    # Deltas
    "Delta",
    "TextDelta",
    "ToolUseInputDelta",
    "ReasoningContentDelta",

    # Messages
    "Role",
    "StopReason",
    "Usage",
    "TextBlock",
    "ToolUseBlock",
    "ReasoningBlock",
    "ContentBlock",
    "Message",

    # Options
    "StreamingOptions",
    "DEFAULT_OPTIONS",
    "DEBUG_OPTIONS",
]
