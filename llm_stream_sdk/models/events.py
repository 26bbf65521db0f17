"""Canonical stream event models.

Every backend adapter translates its native streaming events into these
types, so the aggregator is written once for all backends. Each event has
a fixed ``type`` discriminator and an optional ``raw_event`` holding the
backend's native object when raw event capture is enabled.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .messages import Role, Usage


@dataclass
class StreamEventBase:
    """Base class for canonical stream events and deltas."""
    type: str = field(default="", init=False)
    raw_event: Optional[Any] = field(default=None, compare=False, repr=False, kw_only=True)


# Deltas

@dataclass
class TextDelta(StreamEventBase):
    """A fragment of text for a text block."""
    text: str = ""
    type: str = field(default="textDelta", init=False)


@dataclass
class ToolUseInputDelta(StreamEventBase):
    """A raw fragment of a tool's JSON input.

    Fragments are concatenated and parsed only when the block completes.
    """
    input: str = ""
    type: str = field(default="toolUseInputDelta", init=False)


@dataclass
class ReasoningContentDelta(StreamEventBase):
    """A fragment of reasoning content.

    Carries text and/or a signature, or a redacted-content fragment.
    A block never mixes the two shapes.
    """
    text: Optional[str] = None
    signature: Optional[str] = None
    redacted_content: Optional[bytes] = None
    type: str = field(default="reasoningContentDelta", init=False)


Delta = Union[TextDelta, ToolUseInputDelta, ReasoningContentDelta]


@dataclass
class ToolUseStart:
    """Identity of a tool-use block, sent with its start event."""
    tool_use_id: str
    name: str


# Events

@dataclass
class MessageStartEvent(StreamEventBase):
    """The model started a new response."""
    role: Role = Role.ASSISTANT
    type: str = field(default="messageStart", init=False)

    def __post_init__(self):
        self.role = Role(self.role)


@dataclass
class ContentBlockStartEvent(StreamEventBase):
    """A content block begins at ``content_block_index``.

    ``start`` is only set for tool-use blocks.
    """
    content_block_index: int = 0
    start: Optional[ToolUseStart] = None
    type: str = field(default="contentBlockStart", init=False)


@dataclass
class ContentBlockDeltaEvent(StreamEventBase):
    """An incremental contribution to the block at ``content_block_index``."""
    content_block_index: int = 0
    delta: Optional[Delta] = None
    type: str = field(default="contentBlockDelta", init=False)


@dataclass
class ContentBlockStopEvent(StreamEventBase):
    """The block at ``content_block_index`` is complete."""
    content_block_index: int = 0
    type: str = field(default="contentBlockStop", init=False)


@dataclass
class MessageStopEvent(StreamEventBase):
    """The response is complete."""
    stop_reason: Optional[str] = None
    additional_fields: Optional[Dict[str, Any]] = None
    type: str = field(default="messageStop", init=False)


@dataclass
class MetadataEvent(StreamEventBase):
    """Out-of-band accounting; may arrive before or after the message stop."""
    usage: Optional[Usage] = None
    metrics: Optional[Dict[str, Any]] = None
    type: str = field(default="metadata", init=False)


ModelStreamEvent = Union[
    MessageStartEvent,
    ContentBlockStartEvent,
    ContentBlockDeltaEvent,
    ContentBlockStopEvent,
    MessageStopEvent,
    MetadataEvent,
]

MODEL_STREAM_EVENT_TYPES = (
    MessageStartEvent,
    ContentBlockStartEvent,
    ContentBlockDeltaEvent,
    ContentBlockStopEvent,
    MessageStopEvent,
    MetadataEvent,
)
