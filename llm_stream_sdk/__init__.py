"""
LLM Stream SDK - Streaming aggregation for generative model backends.

This package normalizes backend-specific streaming events into one canonical
event schema and folds them into a complete ``Message`` while re-exposing
the events live. Supported backends:
- Amazon Bedrock (Converse stream)
- Anthropic (Messages API)
- OpenAI (Chat Completions)

Features:
- Canonical stream events across all backends
- Incremental aggregation with a live channel and a final message
- Strict validation of block framing and tool input
- Usage and stop reason normalization
- Streaming metrics with pluggable sinks
"""

__version__ = "0.1.0"

from .errors import (
    BlockKindMismatchError,
    MalformedToolInputError,
    StreamAggregationError,
    StreamProtocolError,
)
from .models.events import (
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    MessageStartEvent,
    MessageStopEvent,
    MetadataEvent,
    ModelStreamEvent,
    ReasoningContentDelta,
    TextDelta,
    ToolUseInputDelta,
    ToolUseStart,
)
from .models.messages import (
    ContentBlock,
    Message,
    ReasoningBlock,
    Role,
    StopReason,
    TextBlock,
    ToolUseBlock,
    Usage,
)
from .models.streaming import StreamingOptions
from .providers import (
    AnthropicProvider,
    BedrockProvider,
    ModelProvider,
    OpenAIProvider,
    ProviderError,
)
from .streaming import (
    AggregatedStream,
    StreamAggregator,
    aggregate_events,
    collect_aggregated,
)

__all__ = [
    # Aggregation
    "AggregatedStream",
    "StreamAggregator",
    "aggregate_events",
    "collect_aggregated",

    # Providers
    "ModelProvider",
    "BedrockProvider",
    "AnthropicProvider",
    "OpenAIProvider",
    "ProviderError",

    # Events
    "MessageStartEvent",
    "ContentBlockStartEvent",
    "ContentBlockDeltaEvent",
    "ContentBlockStopEvent",
    "MessageStopEvent",
    "MetadataEvent",
    "ModelStreamEvent",
    "ToolUseStart",
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

    # Errors
    "StreamAggregationError",
    "StreamProtocolError",
    "BlockKindMismatchError",
    "MalformedToolInputError",
]
